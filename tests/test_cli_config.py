"""Tests for settings layering."""

import argparse
from pathlib import Path

from cli_config import load_config_file, load_settings
from constants import Constants


def _args(**kwargs):
    base = {"CONFIG": None, "CATALOG_URL": None, "REQUEST_TIMEOUT": None, "ROOT_DIR": None}
    base.update(kwargs)
    return argparse.Namespace(**base)


class TestLoadConfigFile:

    def test_section_is_used(self, tmp_path):
        cfg = tmp_path / "c.yml"
        cfg.write_text("coobctl:\n  catalog_url: http://file.local/\n", encoding="utf-8")
        assert load_config_file(str(cfg)) == {"catalog_url": "http://file.local/"}

    def test_flat_mapping(self, tmp_path):
        cfg = tmp_path / "c.yml"
        cfg.write_text("request_timeout: 5\n", encoding="utf-8")
        assert load_config_file(str(cfg)) == {"request_timeout": 5}

    def test_missing_file_is_ignored(self, tmp_path, caplog):
        assert load_config_file(str(tmp_path / "nope.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_broken_yaml_is_ignored(self, tmp_path):
        cfg = tmp_path / "c.yml"
        cfg.write_text("catalog_url: [unclosed\n", encoding="utf-8")
        assert load_config_file(str(cfg)) == {}

    def test_default_file_in_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / Constants.CONFIG_FILE).write_text("root_dir: /opt/atoll\n", encoding="utf-8")
        assert load_config_file(None) == {"root_dir": "/opt/atoll"}


class TestLoadSettings:

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings(_args(), environ={})
        assert settings.catalog_url == Constants.CATALOG_URL
        assert settings.request_timeout == Constants.REQUEST_TIMEOUT
        assert settings.coobs_dir == Path(".") / "Coobs"

    def test_precedence_cli_over_env_over_file(self, tmp_path):
        cfg = tmp_path / "c.yml"
        cfg.write_text(
            "catalog_url: http://file.local/\nrequest_timeout: 5\nroot_dir: /from/file\n",
            encoding="utf-8",
        )
        env = {Constants.ENV_CATALOG_URL: "http://env.local/", Constants.ENV_REQUEST_TIMEOUT: "7"}

        settings = load_settings(_args(CONFIG=str(cfg), CATALOG_URL="http://cli.local/"), environ=env)

        assert settings.catalog_url == "http://cli.local/"
        assert settings.request_timeout == 7.0
        assert settings.root_dir == Path("/from/file")

    def test_invalid_timeout_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings(_args(), environ={Constants.ENV_REQUEST_TIMEOUT: "soon"})
        assert settings.request_timeout == Constants.REQUEST_TIMEOUT
