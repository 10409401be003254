"""Comparable version strings for selecting the newest record or archive.

CPAN uses two version styles. Decimal versions (``1.23``, ``0.9``,
``1.23_01``) are numbers: ``0.9`` is ``0.900`` and therefore newer than
``0.10``, and underscores only separate digits. Each decimal is read as a
dotted version by cutting its fraction into groups of three digits
(``1.2301`` becomes ``1.230.100``). Dotted versions (``v1.2.3``,
``1.2.3``) are compared component by component.
"""

from __future__ import annotations

import re
from functools import total_ordering
from typing import Any, Optional, Tuple

from packaging import version

from packagedetails.constants import Constants

_DECIMAL_PATTERN = re.compile(r"^(?P<integer>\d+)(?:\.(?P<fraction>\d[\d_]*))?$")


@total_ordering
class VersionToken:
    """Immutable, totally ordered wrapper around a raw version string.

    Decimal and dotted versions compare by their numeric value and rank
    above anything that cannot be parsed; unparsable strings (including the
    ``undef`` sentinel) compare lexicographically among themselves. Ordering
    never raises.
    """

    __slots__ = ("_raw", "_key")

    def __init__(self, raw: Optional[str] = None):
        if raw is None or str(raw).strip() == "":
            raw = Constants.UNDEF
        raw = str(raw).strip()
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_key", _sort_key(raw))

    @classmethod
    def undef(cls) -> "VersionToken":
        """Return the sentinel used when a record has no version."""
        return cls(Constants.UNDEF)

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def is_parsable(self) -> bool:
        return self._key[0] == 1

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("VersionToken is immutable")

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"VersionToken({self._raw!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionToken):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other: "VersionToken") -> bool:
        if not isinstance(other, VersionToken):
            return NotImplemented
        return self._key < other._key

    def __hash__(self) -> int:
        return hash(self._key)


def _decimal_as_dotted(raw: str) -> Optional[str]:
    """``"1.23_01"`` -> ``"1.230.100"``; None when ``raw`` is not a decimal version."""
    match = _DECIMAL_PATTERN.match(raw)
    if not match:
        return None
    fraction = (match.group("fraction") or "").replace("_", "")
    fraction += "0" * (-len(fraction) % 3)
    groups = [str(int(fraction[i:i + 3])) for i in range(0, len(fraction), 3)]
    return ".".join([str(int(match.group("integer")))] + groups)


def _sort_key(raw: str) -> Tuple[int, Any]:
    dotted = _decimal_as_dotted(raw)
    try:
        return (1, version.Version(dotted if dotted is not None else raw))
    except version.InvalidVersion:
        return (0, raw)
