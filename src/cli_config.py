"""Runtime settings layered from defaults, config file, environment and CLI.

Precedence (highest first): CLI flags, COOBCTL_* environment variables, the
YAML config file, Constants defaults. A missing or broken config file is
logged and ignored so the CLI keeps working with the remaining layers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Resolved runtime settings for one CLI invocation."""
    catalog_url: str = Constants.CATALOG_URL
    request_timeout: float = Constants.REQUEST_TIMEOUT
    root_dir: Path = Path(".")

    @property
    def coobs_dir(self) -> Path:
        return self.root_dir / Constants.COOBS_DIR


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the YAML config file.

    Args:
        config_path: Explicit path; when None, ``./coobctl.yml`` is used if present.

    Returns:
        Settings mapping (the ``coobctl`` section when present), or {}.
    """
    if not config_path:
        if not os.path.isfile(Constants.CONFIG_FILE):
            return {}
        config_path = Constants.CONFIG_FILE

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}
    if not isinstance(data, dict):
        return {}
    section = data.get(Constants.CONFIG_SECTION, data)
    return section if isinstance(section, dict) else {}


def _coerce_timeout(value: Any, source: str) -> Optional[float]:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid request timeout from %s: %r", source, value)
        return None
    if timeout <= 0:
        logger.warning("Ignoring non-positive request timeout from %s: %r", source, value)
        return None
    return timeout


def load_settings(args: Any = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    """Build Settings from every layer.

    Args:
        args: Parsed CLI namespace (attributes may be missing or None).
        environ: Environment mapping; defaults to os.environ.
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    file_cfg = load_config_file(getattr(args, "CONFIG", None))
    if file_cfg.get("catalog_url"):
        settings.catalog_url = str(file_cfg["catalog_url"])
    if file_cfg.get("request_timeout") is not None:
        settings.request_timeout = _coerce_timeout(file_cfg["request_timeout"], "config file") or settings.request_timeout
    if file_cfg.get("root_dir"):
        settings.root_dir = Path(str(file_cfg["root_dir"]))

    if environ.get(Constants.ENV_CATALOG_URL):
        settings.catalog_url = environ[Constants.ENV_CATALOG_URL]
    if environ.get(Constants.ENV_REQUEST_TIMEOUT):
        settings.request_timeout = (
            _coerce_timeout(environ[Constants.ENV_REQUEST_TIMEOUT], Constants.ENV_REQUEST_TIMEOUT)
            or settings.request_timeout
        )
    if environ.get(Constants.ENV_ROOT_DIR):
        settings.root_dir = Path(environ[Constants.ENV_ROOT_DIR])

    if getattr(args, "CATALOG_URL", None):
        settings.catalog_url = args.CATALOG_URL
    if getattr(args, "REQUEST_TIMEOUT", None) is not None:
        settings.request_timeout = _coerce_timeout(args.REQUEST_TIMEOUT, "--timeout") or settings.request_timeout
    if getattr(args, "ROOT_DIR", None):
        settings.root_dir = Path(args.ROOT_DIR)

    return settings
