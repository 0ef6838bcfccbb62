"""coobctl - restore coobs (versioned package archives) from the repository.

    Returns:
        int: Exit code
"""
import logging
import shutil
import sys

from constants import Constants, ExitCodes
from common.errors import CoobError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import Settings, load_settings
from registry.catalog import CatalogClient
from registry.fetcher import ArchiveFetcher
from registry.manifest import read_coob_versions, read_manifest
from restore import RestoreOrchestrator
from versioning.models import RestoreRequest, is_valid_version, parse_version
from versioning.vars_file import save_vars_file

logger = logging.getLogger(__name__)


def prepare_coobs_dir(settings: Settings, overwrite: bool) -> None:
    """Create the Coobs folder, clearing it first when ``overwrite`` is set."""
    coobs_dir = settings.coobs_dir
    if overwrite and coobs_dir.exists():
        logging.info("Clearing %s", coobs_dir)
        shutil.rmtree(coobs_dir)
    coobs_dir.mkdir(parents=True, exist_ok=True)


def build_request(args, settings: Settings) -> RestoreRequest:
    """Validate CLI values and build the RestoreRequest.

    Raises:
        ValueError: Invalid explicit version or ceiling.
    """
    if args.VERSION and not is_valid_version(args.VERSION):
        raise ValueError(f"Invalid coob version '{args.VERSION}'")
    ceiling = None
    if getattr(args, "CEILING", None):
        ceiling = parse_version(args.CEILING)
        if ceiling is None:
            raise ValueError(f"Invalid ceiling version '{args.CEILING}'")
        if args.VERSION:
            logging.warning("Explicit version given; ceiling %s is ignored.", args.CEILING)
    return RestoreRequest(
        package_id=args.PACKAGE,
        version=args.VERSION or None,
        ceiling=ceiling,
        catalog_url=settings.catalog_url,
        out_dir=settings.root_dir,
    )


def run_restore(args, settings: Settings) -> int:
    """Run the restore command and return an exit code."""
    try:
        request = build_request(args, settings)
    except ValueError as e:
        logging.error("%s", e)
        return ExitCodes.USAGE_ERROR.value

    try:
        prepare_coobs_dir(settings, getattr(args, "OVERWRITE", False))
    except OSError as e:
        logging.error("Cannot prepare %s: %s", settings.coobs_dir, e)
        return ExitCodes.FILE_ERROR.value

    orchestrator = RestoreOrchestrator(
        catalog=CatalogClient(timeout=settings.request_timeout),
        fetcher=ArchiveFetcher(timeout=settings.request_timeout),
    )
    try:
        result = orchestrator.restore(request)
    except CoobError as e:
        logging.error("Failed to restore %s: %s", request.package_id, e)
        return e.exit_code.value

    print(f"{result.package_id} {result.version}")
    return ExitCodes.SUCCESS.value


def run_coob_versions(args, settings: Settings) -> int:
    """Export the versions declared by a restored root coob."""
    package_dir = settings.coobs_dir / args.PACKAGE
    try:
        manifest = read_manifest(package_dir)
    except CoobError as e:
        logging.error("Failed to read coob versions: %s", e)
        return e.exit_code.value

    out_file = args.OUTPUT or (settings.coobs_dir / Constants.COOB_VERSIONS_VARS_FILE)
    try:
        written = save_vars_file(read_coob_versions(manifest), out_file)
    except OSError as e:
        logging.error("Failed to save coob versions vars file to %s: %s", out_file, e)
        return ExitCodes.FILE_ERROR.value
    logging.info("Coob versions written to %s", written)
    return ExitCodes.SUCCESS.value


COMMANDS = {
    "restore": run_restore,
    "coob-versions": run_coob_versions,
}


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(
        level=getattr(args, "LOG_LEVEL", None),
        log_file=getattr(args, "LOG_FILE", None),
        quiet=getattr(args, "QUIET", False),
    )
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND)
        )
    logging.info("===== COOBCTL LAUNCHED: %s =====", " ".join(sys.argv if argv is None else argv))

    settings = load_settings(args)
    code = COMMANDS[args.COMMAND](args, settings)

    logging.info("===== COOBCTL EXITED (CODE: %s) =====", code)
    sys.exit(code)


if __name__ == "__main__":
    main()
