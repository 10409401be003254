"""packagedetails - read, write and validate 02packages.details.txt style indexes."""

__version__ = "0.1.0"

# pylint: disable=wrong-import-position
from packagedetails.errors import (  # noqa: E402
    CountMismatchError,
    DuplicateKeyError,
    EmptyIndexError,
    FetchError,
    MalformedLineError,
    MissingArchivesError,
    MissingRequiredFieldError,
    PackageDetailsError,
    UnindexedArchivesError,
    UnknownHeaderFieldError,
    ValidationError,
)
from packagedetails.version import VersionToken  # noqa: E402
from packagedetails.record import Record  # noqa: E402
from packagedetails.store import RecordStore  # noqa: E402
from packagedetails.header import IndexHeader  # noqa: E402
from packagedetails.index import IndexConfig, PackageIndex  # noqa: E402
from packagedetails.codec import decode, encode  # noqa: E402
from packagedetails.reconcile import Reconciler, reduce_to_newest  # noqa: E402

__all__ = [
    "__version__",
    "CountMismatchError",
    "DuplicateKeyError",
    "EmptyIndexError",
    "FetchError",
    "IndexConfig",
    "IndexHeader",
    "MalformedLineError",
    "MissingArchivesError",
    "MissingRequiredFieldError",
    "PackageDetailsError",
    "PackageIndex",
    "Reconciler",
    "Record",
    "RecordStore",
    "UnindexedArchivesError",
    "UnknownHeaderFieldError",
    "ValidationError",
    "VersionToken",
    "decode",
    "encode",
    "reduce_to_newest",
]
