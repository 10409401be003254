"""Record collection keyed by package name, then version."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from packagedetails.constants import Constants
from packagedetails.errors import DuplicateKeyError, MissingRequiredFieldError
from packagedetails.record import PATH_KEY, PRIMARY_KEY, VERSION_KEY, Record, column_key
from packagedetails.version import VersionToken

logger = logging.getLogger(__name__)


class RecordStore:
    """Owns every Record of an index.

    With ``allow_packages_only_once`` set (the default), adding a package
    name that is already present fails whatever its version. With it unset,
    any number of versions may be added and ``as_unique_sorted_list`` keeps
    only the highest version of each package.
    """

    def __init__(
        self,
        columns: Optional[Sequence[str]] = None,
        allow_packages_only_once: bool = True,
    ):
        """Initialize an empty store.

        Args:
            columns: Column names in output order.
            allow_packages_only_once: Reject a second record for a package name.
        """
        self._columns: List[str] = list(columns) if columns else [
            Constants.PRIMARY_KEY_COLUMN,
            Constants.VERSION_COLUMN,
            Constants.PATH_COLUMN,
        ]
        self._primary_alias = self._find_primary_alias(self._columns)
        self.allow_packages_only_once = allow_packages_only_once
        self._entries: Dict[str, Dict[str, Record]] = {}
        self._sorted: Optional[Tuple[Record, ...]] = None

    @staticmethod
    def _find_primary_alias(columns: Sequence[str]) -> Optional[str]:
        """Key of the first column when it stands in for "package name".

        That is only the case when no "package name" column is declared and
        the first column is not one of the other known columns.
        """
        keys = [column_key(column) for column in columns]
        if PRIMARY_KEY in keys or keys[0] in (VERSION_KEY, PATH_KEY):
            return None
        return keys[0]

    def _is_primary(self, key: str) -> bool:
        return key in (PRIMARY_KEY, self._primary_alias)

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    def column_index_for(self, column: str) -> Optional[int]:
        """Return the list position of the named column, or None."""
        key = column_key(column)
        for position, name in enumerate(self._columns):
            if name == column or column_key(name) == key:
                return position
        return None

    def entries(self) -> Mapping[str, Mapping[str, Record]]:
        """Read-only view of package name -> version -> Record."""
        return MappingProxyType(
            {name: MappingProxyType(versions) for name, versions in self._entries.items()}
        )

    def add(self, fields: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Record:
        """Add a record built from column values.

        The package name may be given under the declared column name
        ("package name") or the identifier form ("package_name"). A missing
        or empty version becomes the ``undef`` sentinel.

        Raises:
            MissingRequiredFieldError: no package name was supplied.
            DuplicateKeyError: the package is already present and packages
                may appear only once.
        """
        values: Dict[str, Any] = dict(fields or {})
        values.update(kwargs)

        package_name = None
        version = None
        path = None
        extra: List[Tuple[str, str]] = []
        for column, value in values.items():
            key = column_key(column)
            if self._is_primary(key):
                package_name = value
            elif key == VERSION_KEY:
                version = value
            elif key == PATH_KEY:
                path = value
            else:
                extra.append((column, "" if value is None else str(value)))

        if package_name is None or str(package_name).strip() == "":
            raise MissingRequiredFieldError(f"No '{Constants.PRIMARY_KEY_COLUMN}' parameter")
        package_name = str(package_name).strip()

        if self.allow_packages_only_once and self.already_present(package_name):
            raise DuplicateKeyError(package_name)

        record = Record(
            package_name=package_name,
            version=VersionToken(None if version is None else str(version)),
            path="" if path is None else str(path),
            extra_columns=tuple(extra),
        )
        versions = self._entries.setdefault(package_name, {})
        if str(record.version) in versions:
            logger.debug("Replacing %s %s", package_name, record.version)
        self._mark_as_dirty()
        versions[str(record.version)] = record
        return record

    def _mark_as_dirty(self) -> None:
        self._sorted = None

    def already_present(self, package_name: str) -> bool:
        """Returns true if there is already a record for ``package_name``."""
        return package_name in self._entries

    already_added = already_present

    def count(self) -> int:
        """Number of stored (name, version) pairs, duplicates included.

        This is not the number of lines the rendered file would have; see
        ``as_unique_sorted_list`` for that.
        """
        return sum(len(versions) for versions in self._entries.values())

    def __len__(self) -> int:
        return self.count()

    def as_unique_sorted_list(self) -> Tuple[Record, ...]:
        """Records sorted by package name, one per package, highest version.

        When two versions compare equal the first one added is kept. The
        result is cached until the next ``add``.
        """
        if self._sorted is None:
            self._sorted = tuple(
                max(self._entries[name].values(), key=lambda record: record.version)
                for name in sorted(self._entries)
            )
        return self._sorted

    def as_text(self, columns: Optional[Sequence[str]] = None) -> str:
        """Render the unique sorted records, one tab-separated line each.

        The primary key column always takes its value from the record's
        package name, whichever spelling the caller asks for. Absent or empty
        values are written as ``undef`` so every line keeps its columns.
        """
        columns = [
            Constants.PRIMARY_KEY_COLUMN if self._is_primary(column_key(column)) else column
            for column in (columns if columns is not None else self._columns)
        ]
        return "".join(record.as_string(columns) for record in self.as_unique_sorted_list())

    as_string = as_text
