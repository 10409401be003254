"""PackageIndex: an index header together with its records."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from packagedetails import __version__
from packagedetails.constants import Constants
from packagedetails.errors import MalformedLineError
from packagedetails.header import IndexHeader, format_date
from packagedetails.record import Record
from packagedetails.store import RecordStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _default_written_by() -> str:
    program = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else Constants.PROGRAM_NAME
    return f"{program} using {Constants.PROGRAM_NAME} {__version__}"


@dataclass
class IndexConfig:
    """Settings for a new index.

    ``clock`` supplies the Last-Updated timestamp; pass a fixed function in
    tests. ``extra_fields`` adds or overrides header fields by internal name.
    """

    file: str = Constants.DEFAULT_FILE
    url: str = Constants.DEFAULT_URL
    description: str = Constants.DEFAULT_DESCRIPTION
    columns: str = Constants.DEFAULT_COLUMNS
    intended_for: str = Constants.DEFAULT_INTENDED_FOR
    written_by: str = field(default_factory=_default_written_by)
    allow_packages_only_once: bool = True
    extra_fields: Dict[str, str] = field(default_factory=dict)
    clock: Callable[[], datetime] = _utcnow

    def header_fields(self) -> Dict[str, str]:
        """Header fields for a new index, Last-Updated taken from the clock."""
        fields = {
            "file": self.file,
            "url": self.url,
            "description": self.description,
            "columns": self.columns,
            "intended_for": self.intended_for,
            "written_by": self.written_by,
            "last_updated": format_date(self.clock()),
        }
        fields.update(self.extra_fields)
        return fields


class PackageIndex:
    """A header and a record store that always point at each other.

    Use ``PackageIndex.new`` to start an index with default header fields;
    the plain constructor only sets the fields it is given, which is what
    the decoder needs.
    """

    def __init__(
        self,
        header_fields: Optional[Mapping[str, str]] = None,
        allow_packages_only_once: bool = True,
    ):
        self.header = IndexHeader(header_fields)
        self.store = RecordStore(
            columns=self.header.columns_as_list(),
            allow_packages_only_once=allow_packages_only_once,
        )
        self.header.bind(self.store)
        self.warnings: List[MalformedLineError] = []
        self.source: Optional[str] = None

    @classmethod
    def new(cls, config: Optional[IndexConfig] = None, **fields: Any) -> "PackageIndex":
        """Create an empty index with default header fields.

        Args:
            config: Defaults and policy; ``IndexConfig()`` when omitted.
            **fields: Header fields overriding the configured ones.
        """
        config = config or IndexConfig()
        header_fields = config.header_fields()
        header_fields.update({name: str(value) for name, value in fields.items()})
        return cls(header_fields, allow_packages_only_once=config.allow_packages_only_once)

    def replace_store(self, store: RecordStore) -> None:
        """Swap in a new record store and re-point the header at it."""
        self.store = store
        self.header.bind(store)

    # Header pass-throughs

    def set_header(self, field: str, value: Any) -> None:
        self.header.set(field, value)

    def get_header(self, field: str) -> str:
        return self.header.get(field)

    def header_exists(self, field: str) -> bool:
        return self.header.exists(field)

    def columns_as_list(self) -> List[str]:
        return self.header.columns_as_list()

    # Store pass-throughs

    def add(self, fields: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Record:
        return self.store.add(fields, **kwargs)

    add_entry = add

    def already_present(self, package_name: str) -> bool:
        return self.store.already_present(package_name)

    def count(self) -> int:
        return self.store.count()

    def as_unique_sorted_list(self) -> Tuple[Record, ...]:
        return self.store.as_unique_sorted_list()

    def records(self) -> Tuple[Record, ...]:
        return self.store.as_unique_sorted_list()

    @property
    def line_count(self) -> int:
        return self.header.line_count()

    def as_text(self, columns: Optional[Sequence[str]] = None) -> str:
        """The whole index, header and records, as text."""
        return self.header.render() + self.store.as_text(
            columns if columns is not None else self.header.columns_as_list()
        )

    def __repr__(self) -> str:
        return f"<PackageIndex {self.line_count} records from {self.source or 'memory'}>"
