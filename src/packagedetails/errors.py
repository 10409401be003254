"""Exception hierarchy for index building, decoding and validation."""

from __future__ import annotations

from typing import Iterable, List, Optional


class PackageDetailsError(Exception):
    """Base class for every error raised by packagedetails."""


class MissingRequiredFieldError(PackageDetailsError, ValueError):
    """Raised when a record is added without a package name."""


class DuplicateKeyError(PackageDetailsError, ValueError):
    """Raised when a package is added twice while packages may appear only once."""

    def __init__(self, package_name: str):
        super().__init__(f"{package_name} was already added to the index")
        self.package_name = package_name


class MalformedLineError(PackageDetailsError, ValueError):
    """A header or record line that could not be parsed cleanly.

    The decoder does not raise these; it logs them and collects them on
    ``PackageIndex.warnings`` so the rest of the file is still read.
    """

    def __init__(self, line_number: int, line: str, reason: str):
        super().__init__(f"line {line_number}: {reason}: {line!r}")
        self.line_number = line_number
        self.line = line
        self.reason = reason


class UnknownHeaderFieldError(PackageDetailsError, LookupError):
    """Raised when reading a header field the index does not have."""

    def __init__(self, field: str):
        super().__init__(f"No such header as {field}")
        self.field = field


class FetchError(PackageDetailsError):
    """Raised when a remote index cannot be downloaded."""


class ValidationError(PackageDetailsError):
    """Base class for reconciler failures.

    ``errors`` holds every failure found by the same check run, so the
    first raised error still tells the caller everything that is wrong.
    """

    errors: List["ValidationError"]

    def __init__(self, message: str):
        super().__init__(message)
        self.errors = [self]


class CountMismatchError(ValidationError):
    """The header line count disagrees with the number of unique records."""

    def __init__(self, header_count, record_count: int):
        super().__init__(
            f"Header says there are {header_count} lines but the index has {record_count} records"
        )
        self.header_count = header_count
        self.record_count = record_count


class EmptyIndexError(ValidationError):
    """The index has no records."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "Header line count is zero")


class _PathSetError(ValidationError):
    label = ""

    def __init__(self, paths: Iterable[str]):
        self.paths = list(paths)
        super().__init__(f"{len(self.paths)} {self.label}: " + ", ".join(self.paths))


class MissingArchivesError(_PathSetError):
    """Index records whose archive is not present in the corpus."""

    label = "indexed archives missing from the corpus"


class UnindexedArchivesError(_PathSetError):
    """Corpus archives (newest per distribution) that no record points at."""

    label = "archives not in the index"
