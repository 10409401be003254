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
    VALIDATION_FAILED = 3


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROGRAM_NAME = "packagedetails"

    # Header defaults for a freshly created index
    DEFAULT_FILE = "02packages.details.txt"
    DEFAULT_URL = "http://example.com/MyCPAN/modules/02packages.details.txt"
    DEFAULT_DESCRIPTION = "Package names for my private CPAN"
    DEFAULT_COLUMNS = "package name, version, path"
    DEFAULT_INTENDED_FOR = "My private CPAN"

    PRIMARY_KEY_COLUMN = "package name"
    VERSION_COLUMN = "version"
    PATH_COLUMN = "path"
    UNDEF = "undef"
    LINE_COUNT_FIELD = "line_count"
    COLUMNS_FIELD = "columns"

    # Longest suffixes first so ".tar.gz" wins over ".gz"-like endings
    ARCHIVE_SUFFIXES = (".tar.bz2", ".tar.gz", ".tar.xz", ".tgz", ".zip", ".tar")
    GZIP_MAGIC = b"\x1f\x8b"
    ENCODING = "utf-8"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "PACKAGEDETAILS_LOG_LEVEL"
    ENV_CONFIG = "PACKAGEDETAILS_CONFIG"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
