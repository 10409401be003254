"""Text codec for the header and record sections of an index.

Compression is handled by the caller (see ``storage``); these functions
work on plain, already decompressed content.
"""

from __future__ import annotations

import logging
import re
from typing import IO, Any, Dict, Iterable, List, Tuple, Union

from packagedetails.common.logging_utils import Timer, extra_context, is_debug_enabled
from packagedetails.constants import Constants
from packagedetails.errors import (
    DuplicateKeyError,
    MalformedLineError,
    MissingRequiredFieldError,
)
from packagedetails.header import to_internal_name
from packagedetails.index import PackageIndex

logger = logging.getLogger(__name__)

_HEADER_SPLIT = re.compile(r"\s*:\s*")

Source = Union[bytes, str, IO[bytes], IO[str]]


def _read_lines(data: Source, problems: List[MalformedLineError]) -> List[str]:
    """Split ``data`` into text lines, decoding bytes one line at a time.

    A line that is not valid UTF-8 is decoded with replacement characters
    and reported in ``problems``.
    """
    if hasattr(data, "read"):
        data = data.read()  # type: ignore[union-attr]
    if not isinstance(data, (bytes, bytearray)):
        return str(data).splitlines()

    lines = []
    for line_number, raw in enumerate(bytes(data).splitlines(), start=1):
        try:
            line = raw.decode(Constants.ENCODING)
        except UnicodeDecodeError as exc:
            line = raw.decode(Constants.ENCODING, errors="replace")
            problem = MalformedLineError(line_number, line, f"not valid {Constants.ENCODING} ({exc.reason})")
            logger.warning("%s", problem)
            problems.append(problem)
        lines.append(line)
    return lines


def _warn(index: PackageIndex, line_number: int, line: str, reason: str) -> None:
    problem = MalformedLineError(line_number, line, reason)
    logger.warning("%s", problem)
    index.warnings.append(problem)


def _parse_header(lines: Iterable[Tuple[int, str]], warnings: List[MalformedLineError]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for line_number, line in lines:
        parts = _HEADER_SPLIT.split(line.strip(), maxsplit=1)
        if len(parts) != 2 or not parts[0]:
            problem = MalformedLineError(line_number, line, "header line has no field name")
            logger.warning("%s, skipping", problem)
            warnings.append(problem)
            continue
        field, value = parts
        fields[to_internal_name(field)] = value
    return fields


def decode(data: Source, allow_packages_only_once: bool = True) -> PackageIndex:
    """Build a PackageIndex from index text.

    While parsing, field names are mapped to identifiers: the field is
    lower-cased and hyphens become underscores (``Written-By`` becomes
    ``written_by``). Record lines are split on whitespace and matched, in
    order, to the names in the Columns field.

    Lines that cannot be used as they are do not stop decoding; each one is
    logged and collected on the returned index's ``warnings`` list.

    Args:
        data: Bytes, text, or a file object holding the decompressed index.
        allow_packages_only_once: Duplicate policy for the record store.

    Returns:
        PackageIndex: The decoded index.
    """
    encoding_problems: List[MalformedLineError] = []
    lines = _read_lines(data, encoding_problems)
    with Timer() as timer:
        header_lines = []
        position = 0
        while position < len(lines):
            line = lines[position]
            position += 1
            if not line.strip():
                break
            header_lines.append((position, line))

        header_warnings: List[MalformedLineError] = []
        index = PackageIndex(
            _parse_header(header_lines, header_warnings),
            allow_packages_only_once=allow_packages_only_once,
        )
        index.warnings.extend(encoding_problems)
        index.warnings.extend(header_warnings)

        columns = index.columns_as_list()
        for line_number, line in enumerate(lines[position:], start=position + 1):
            values = line.split()
            if not values:
                continue
            if len(values) != len(columns):
                _warn(
                    index,
                    line_number,
                    line,
                    f"expected {len(columns)} fields but found {len(values)}",
                )
            fields: Dict[str, Any] = dict(zip(columns, values))
            try:
                index.add(fields)
            except (DuplicateKeyError, MissingRequiredFieldError) as exc:
                _warn(index, line_number, line, str(exc))

    if is_debug_enabled(logger):
        logger.debug(
            "Decoded index",
            extra=extra_context(
                event="decode",
                component="codec",
                action="decode",
                count=index.count(),
                warnings=len(index.warnings),
                duration_ms=timer.duration_ms(),
            ),
        )
    return index


def encode(index: PackageIndex) -> bytes:
    """Serialize an index: the rendered header followed by the records."""
    text = index.header.render() + index.store.as_text(index.header.columns_as_list())
    return text.encode(Constants.ENCODING)


def write_fh(index: PackageIndex, fh: IO[bytes]) -> int:
    """Write the encoded index to a binary file object; returns bytes written."""
    payload = encode(index)
    fh.write(payload)
    return len(payload)
