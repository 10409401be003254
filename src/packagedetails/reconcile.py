"""Cross-validation of an index against itself and a corpus of archives."""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from packagedetails.common.logging_utils import Timer, extra_context, is_debug_enabled
from packagedetails.constants import Constants
from packagedetails.errors import (
    CountMismatchError,
    EmptyIndexError,
    MissingArchivesError,
    UnindexedArchivesError,
    ValidationError,
)
from packagedetails.index import PackageIndex
from packagedetails.version import VersionToken

logger = logging.getLogger(__name__)

# Greedy name, version starts with a digit (optionally "v") and has no hyphens
# apart from a trailing -TRIAL marker.
_DISTNAME_PATTERN = re.compile(r"^(?P<name>.+)-(?P<version>v?\d[^-]*(?:-TRIAL)?)$")


def strip_archive_suffix(filename: str) -> Optional[str]:
    """Return ``filename`` without its archive suffix, or None if it has none."""
    lowered = filename.lower()
    for suffix in Constants.ARCHIVE_SUFFIXES:
        if lowered.endswith(suffix):
            return filename[: -len(suffix)]
    return None


def parse_distribution_filename(path: str) -> Optional[Tuple[str, str]]:
    """Extract (distribution name, version) from an archive path.

    ``authors/id/F/FO/FOO/Foo-Bar-1.23.tar.gz`` gives ``("Foo-Bar", "1.23")``.

    Returns:
        The pair, or None when the filename does not follow the
        ``Name-Version.suffix`` convention.
    """
    filename = re.split(r"[\\/]", path)[-1]
    stem = strip_archive_suffix(filename)
    if not stem:
        return None
    match = _DISTNAME_PATTERN.match(stem)
    if not match:
        return None
    return match.group("name"), match.group("version")


def reduce_to_newest(paths: Iterable[str]) -> List[str]:
    """Keep only the newest archive of each distribution.

    Paths are grouped by the distribution name parsed from their filename and
    only the highest version of each group survives (the first one seen when
    versions compare equal). Paths whose filename cannot be parsed are always
    kept. Input order is preserved and repeated paths collapse to one.
    """
    ordered = list(dict.fromkeys(paths))
    newest: Dict[str, Tuple[VersionToken, str]] = {}
    for path in ordered:
        parsed = parse_distribution_filename(path)
        if parsed is None:
            continue
        name, raw_version = parsed
        token = VersionToken(raw_version)
        current = newest.get(name)
        if current is None or token > current[0]:
            newest[name] = (token, path)

    winners = {path for _, path in newest.values()}
    return [
        path for path in ordered
        if path in winners or parse_distribution_filename(path) is None
    ]


def _normalize(path: str) -> str:
    return os.path.normpath(path)


class Reconciler:
    """Checks an index for internal consistency and against a corpus.

    Record paths are relative to ``corpus_root``; the archive list passed to
    ``check``/``validate`` is expected to hold paths under that root (as
    returned by ``storage.list_archives``).
    """

    def __init__(self, corpus_root: str = ""):
        self.corpus_root = corpus_root

    def expected_path(self, record_path: str) -> str:
        """Where a record's archive should be on disk."""
        parts = [part for part in re.split(r"[\\/]", record_path) if part]
        return _normalize(os.path.join(self.corpus_root, *parts)) if parts else ""

    def validate(
        self, index: PackageIndex, archive_paths: Optional[Sequence[str]] = None
    ) -> List[ValidationError]:
        """Run every check and return all failures (empty list when valid)."""
        errors: List[ValidationError] = []
        with Timer() as timer:
            records = index.as_unique_sorted_list()

            header_value = index.get_header(Constants.LINE_COUNT_FIELD)
            try:
                header_count: Optional[int] = int(str(header_value).strip())
            except ValueError:
                header_count = None
            if header_count != len(records):
                errors.append(
                    CountMismatchError(
                        header_count if header_count is not None else header_value,
                        len(records),
                    )
                )
            if header_count == 0:
                errors.append(EmptyIndexError())

            if archive_paths is not None:
                errors.extend(self._check_corpus(records, archive_paths))

        for error in errors:
            error.errors = errors
        if is_debug_enabled(logger):
            logger.debug(
                "Validated index",
                extra=extra_context(
                    event="validate",
                    component="reconcile",
                    action="check",
                    outcome="failed" if errors else "passed",
                    count=len(errors),
                    duration_ms=timer.duration_ms(),
                ),
            )
        return errors

    def _check_corpus(self, records, archive_paths: Sequence[str]) -> List[ValidationError]:
        errors: List[ValidationError] = []
        corpus = {_normalize(path) for path in archive_paths}

        expected = [self.expected_path(record.path) for record in records]
        missing = [path for path in expected if path not in corpus]
        if missing:
            logger.info("%d indexed archives are missing from the corpus", len(missing))
            errors.append(MissingArchivesError(missing))

        indexed = set(expected)
        unindexed = [
            path for path in reduce_to_newest(archive_paths)
            if _normalize(path) not in indexed
        ]
        if unindexed:
            logger.info("%d corpus archives are not in the index", len(unindexed))
            errors.append(UnindexedArchivesError(unindexed))
        return errors

    def check(self, index: PackageIndex, archive_paths: Optional[Sequence[str]] = None) -> None:
        """Raise the first failure found; every failure is on its ``errors``.

        Raises:
            CountMismatchError: header line count differs from the records.
            EmptyIndexError: header line count is zero.
            MissingArchivesError: indexed archives absent from the corpus.
            UnindexedArchivesError: newest corpus archives absent from the index.
        """
        errors = self.validate(index, archive_paths)
        if errors:
            raise errors[0]


def check(
    index: PackageIndex,
    archive_paths: Optional[Sequence[str]] = None,
    corpus_root: str = "",
) -> None:
    """Validate ``index``; see ``Reconciler.check``."""
    Reconciler(corpus_root).check(index, archive_paths)
