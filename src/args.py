"""Argument parsing functionality for coobctl."""

import argparse


def _add_common(parser):
    """Options shared by every command."""
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    parser.add_argument("--root-dir",
                        dest="ROOT_DIR",
                        help="Toolkit root directory; coobs live in <root>/Coobs (default: current directory)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Only print errors to the console.",
                        action="store_true")


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="coobctl",
        description="coobctl - restore coobs from the repository for further deployment",
        add_help=True,
    )
    commands = parser.add_subparsers(dest="COMMAND", metavar="<command>")
    commands.required = True

    restore = commands.add_parser(
        "restore",
        help="Restore a coob and its dependencies from the repository",
    )
    restore.add_argument("PACKAGE",
                         help="Root coob name, e.g. Coral.Atoll",
                         type=str)
    restore.add_argument("VERSION",
                         help="Explicit coob version; latest published version when omitted",
                         nargs="?",
                         type=str)
    restore.add_argument("--ceiling",
                         dest="CEILING",
                         help="Exclusive upper bound when picking the latest version",
                         action="store",
                         type=str)
    restore.add_argument("--catalog-url",
                         dest="CATALOG_URL",
                         help="Coob repository base URL",
                         action="store",
                         type=str)
    restore.add_argument("--timeout",
                         dest="REQUEST_TIMEOUT",
                         help="Network timeout in seconds",
                         action="store",
                         type=float)
    restore.add_argument("-o", "--overwrite",
                         dest="OVERWRITE",
                         help="Clear the Coobs folder before restoring",
                         action="store_true")
    _add_common(restore)

    versions = commands.add_parser(
        "coob-versions",
        help="Write the versions of a restored coob and its dependencies as a variables file",
    )
    versions.add_argument("-p", "--package",
                          dest="PACKAGE",
                          help="Restored root coob name (default: Coral.Atoll)",
                          action="store",
                          type=str,
                          default="Coral.Atoll")
    versions.add_argument("--output",
                          dest="OUTPUT",
                          help="Output file (default: <root>/Coobs/coob-versions.xml)",
                          action="store",
                          type=str)
    _add_common(versions)

    return parser.parse_args(argv)
