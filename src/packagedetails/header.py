"""The metadata block at the top of an index file.

It looks something like::

    File:         02packages.details.txt
    URL:          http://www.perl.com/CPAN/modules/02packages.details.txt
    Description:  Package names found in directory $CPAN/authors/id/
    Columns:      package name, version, path
    Intended-For: Automated fetch routines, namespace documentation.
    Written-By:   Id: mldistwatch.pm 1063 2008-09-23 05:23:57Z k
    Line-Count:   59754
    Last-Updated: Thu, 23 Oct 2008 02:27:36 GMT

Field names are kept internally in identifier form (``written_by``) and
turned back into their external form (``Written-By``) when rendered.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

from packagedetails.constants import Constants
from packagedetails.errors import UnknownHeaderFieldError

if TYPE_CHECKING:
    from packagedetails.store import RecordStore

_ACRONYMS = {"url": "URL"}


def to_external_name(field: str) -> str:
    """Map an internal field name to the name written in the file.

    Underscores become hyphens and the first letter of every hyphenated part
    is upper-cased; ``url`` is always written ``URL``.
    """
    if field.lower() in _ACRONYMS:
        return _ACRONYMS[field.lower()]
    out = field.replace("_", "-")
    out = out[:1].upper() + out[1:]
    return re.sub(r"-(.)", lambda m: "-" + m.group(1).upper(), out)


def to_internal_name(field: str) -> str:
    """Map a field name read from a file to its identifier form."""
    return field.strip().lower().replace("-", "_")


def format_date(moment: Optional[datetime] = None) -> str:
    """Format a timestamp as ``Thu, 23 Oct 2008 02:27:36 GMT``.

    Naive datetimes are taken to be UTC.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


class IndexHeader:
    """Header fields of an index plus the computed line count."""

    def __init__(
        self,
        fields: Optional[Mapping[str, str]] = None,
        store: Optional["RecordStore"] = None,
    ):
        self._fields: Dict[str, str] = {}
        self._store = store
        for name, value in (fields or {}).items():
            self.set(name, value)

    def bind(self, store: "RecordStore") -> None:
        """Point the line count at ``store``."""
        self._store = store

    def set(self, field: str, value) -> None:
        self._fields[field] = "" if value is None else str(value)

    def exists(self, field: str) -> bool:
        """Returns true if the header has ``field``, regardless of its value."""
        if field == Constants.LINE_COUNT_FIELD:
            return True
        return field in self._fields

    def get(self, field: str) -> str:
        """Return the value of ``field``.

        ``line_count`` is the value read from a file when there was one, and
        otherwise the number of unique records.

        Raises:
            UnknownHeaderFieldError: the header has no such field.
        """
        if field in self._fields:
            return self._fields[field]
        if field == Constants.LINE_COUNT_FIELD:
            return str(self.line_count())
        raise UnknownHeaderFieldError(field)

    def fields(self) -> Dict[str, str]:
        """Renderable fields (bookkeeping and the stored line count excluded)."""
        return {
            name: value
            for name, value in self._fields.items()
            if not name.startswith("_") and name != Constants.LINE_COUNT_FIELD
        }

    def line_count(self) -> int:
        """Number of lines the records section will have."""
        if self._store is None:
            return 0
        return len(self._store.as_unique_sorted_list())

    def columns_as_list(self) -> List[str]:
        columns = self._fields.get(Constants.COLUMNS_FIELD, Constants.DEFAULT_COLUMNS)
        return [column for column in re.split(r",\s+", columns.strip()) if column]

    def render(self) -> str:
        """Render the header block, ending with Line-Count and a blank line."""
        external = sorted(
            (to_external_name(name), value) for name, value in self.fields().items()
        )
        lines = [f"{name}: {value}" for name, value in external]
        lines.append(f"{to_external_name(Constants.LINE_COUNT_FIELD)}: {self.line_count()}")
        return "".join(line + "\n" for line in lines) + "\n"

    as_string = render
