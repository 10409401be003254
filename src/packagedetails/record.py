"""A single index line: package name, version, path and extra columns."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from packagedetails.constants import Constants
from packagedetails.version import VersionToken


def column_key(column: str) -> str:
    """Return the identifier form of a column name ("package name" -> "package_name")."""
    return "_".join(column.strip().lower().replace("-", " ").split())


PRIMARY_KEY = column_key(Constants.PRIMARY_KEY_COLUMN)
VERSION_KEY = column_key(Constants.VERSION_COLUMN)
PATH_KEY = column_key(Constants.PATH_COLUMN)


@dataclass(frozen=True)
class Record:
    """One package-name/version/path tuple.

    Records are never mutated once stored; a replacement is made by adding a
    new record under the same name and version.
    """

    package_name: str
    version: VersionToken = field(default_factory=VersionToken.undef)
    path: str = ""
    extra_columns: Tuple[Tuple[str, str], ...] = ()

    @property
    def extra(self) -> Mapping[str, str]:
        """Read-only view of the columns beyond name, version and path."""
        return MappingProxyType(dict(self.extra_columns))

    def value_for(self, column: str) -> Optional[str]:
        """Return the value stored for ``column``, accepting either spelling.

        Args:
            column: Declared column name ("package name") or identifier form.

        Returns:
            The string value, or None when the record has nothing for it.
        """
        key = column_key(column)
        if key == PRIMARY_KEY:
            return self.package_name
        if key == VERSION_KEY:
            return str(self.version)
        if key == PATH_KEY:
            return self.path
        for name, value in self.extra_columns:
            if name == column or column_key(name) == key:
                return value
        return None

    def as_string(self, columns) -> str:
        """Render this record as one tab-separated line ending in a newline."""
        values = []
        for column in columns:
            value = self.value_for(column)
            values.append(value if value else Constants.UNDEF)
        return "\t".join(values) + "\n"
