"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    RESOLUTION_ERROR = 3
    USAGE_ERROR = 4


class RestoreStage(Enum):
    """Stages of a single restore run.

    Args:
        Enum (string): Stage names as they appear in logs.
    """

    START = "start"
    VERSION_RESOLVED = "version_resolved"
    ROOT_FETCHED = "root_fetched"
    MANIFEST_READ = "manifest_read"
    DEPENDENCIES_FETCHED = "dependencies_fetched"
    FAILED = "failed"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    CATALOG_URL = "http://coobs.sftconsult.synology.me:5000/"
    COOB_EXTENSION = ".coob"
    ARCHIVE_EXTENSION = ".zip"
    COOBS_DIR = "Coobs"
    MANIFEST_FILE = "coob.props"
    MSBUILD_NAMESPACE = "http://schemas.microsoft.com/developer/msbuild/2003"
    COOB_VERSIONS_VARS_FILE = "coob-versions.xml"
    CONFIG_FILE = "coobctl.yml"
    CONFIG_SECTION = "coobctl"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    REQUEST_TIMEOUT = 60  # Timeout in seconds for connect and idle read
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    MAX_VERSION_COMPONENT = 2147483647

    ENV_CATALOG_URL = "COOBCTL_CATALOG_URL"
    ENV_REQUEST_TIMEOUT = "COOBCTL_REQUEST_TIMEOUT"
    ENV_ROOT_DIR = "COOBCTL_ROOT_DIR"
    ENV_LOG_LEVEL = "COOBCTL_LOG_LEVEL"
