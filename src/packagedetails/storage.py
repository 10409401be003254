"""Reading and writing index files, local or remote, and listing a corpus.

Everything that touches the file system or the network lives here so the
index, codec and reconciler modules stay free of I/O.
"""
from __future__ import annotations

import gzip
import logging
import os
from typing import List, Optional

import requests

from packagedetails.codec import decode, encode
from packagedetails.common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from packagedetails.constants import Constants
from packagedetails.errors import FetchError
from packagedetails.index import PackageIndex
from packagedetails.reconcile import strip_archive_suffix

logger = logging.getLogger(__name__)


def maybe_gunzip(payload: bytes) -> bytes:
    """Decompress ``payload`` when it starts with the gzip magic bytes."""
    if payload[:2] == Constants.GZIP_MAGIC:
        return gzip.decompress(payload)
    return payload


def read_index(path: str, allow_packages_only_once: bool = True) -> PackageIndex:
    """Read an index file, compressed or not.

    Args:
        path: File path of a 02packages.details.txt(.gz) style index.
        allow_packages_only_once: Duplicate policy for the record store.

    Returns:
        PackageIndex: The decoded index, with ``source`` set to ``path``.
    """
    with open(path, "rb") as fh:
        payload = fh.read()
    logger.info("Read %d bytes from %s", len(payload), path)
    index = decode(maybe_gunzip(payload), allow_packages_only_once=allow_packages_only_once)
    index.source = path
    return index


def write_index(index: PackageIndex, path: str, compress: Optional[bool] = None) -> int:
    """Write an index to ``path``.

    Args:
        index: Index to write.
        path: Output file path.
        compress: Gzip the output; when None, gzip only if ``path`` ends in ``.gz``.

    Returns:
        int: Number of bytes written to disk.
    """
    payload = encode(index)
    if compress is None:
        compress = path.endswith(".gz")
    if compress:
        payload = gzip.compress(payload)
    with open(path, "wb") as fh:
        fh.write(payload)
    logger.info("Wrote %d records (%d bytes) to %s", index.line_count, len(payload), path)
    return len(payload)


def fetch_index(url: str, allow_packages_only_once: bool = True) -> PackageIndex:
    """Download and decode an index.

    Raises:
        FetchError: on timeouts, connection errors and non-200 responses.
    """
    safe_target = safe_url(url)
    with Timer() as timer:
        try:
            response = requests.get(url, timeout=Constants.REQUEST_TIMEOUT)
        except requests.Timeout as exc:
            logger.error(
                "Index request timed out after %s seconds",
                Constants.REQUEST_TIMEOUT,
            )
            raise FetchError(f"Timed out fetching {safe_target}") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("Index connection error: %s", exc)
            raise FetchError(f"Could not fetch {safe_target}: {exc}") from exc

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="storage",
                action="GET",
                status_code=response.status_code,
                duration_ms=timer.duration_ms(),
                target=safe_target,
            ),
        )
    if response.status_code != 200:
        raise FetchError(f"{safe_target} returned HTTP {response.status_code}")

    index = decode(
        maybe_gunzip(response.content),
        allow_packages_only_once=allow_packages_only_once,
    )
    index.source = safe_target
    return index


def load_index(location: str, allow_packages_only_once: bool = True) -> PackageIndex:
    """Read an index from a URL (http/https) or a local path."""
    if location.startswith(("http://", "https://")):
        return fetch_index(location, allow_packages_only_once=allow_packages_only_once)
    return read_index(location, allow_packages_only_once=allow_packages_only_once)


def list_archives(root: str) -> List[str]:
    """Return every archive file under ``root``, as paths joined onto ``root``, sorted."""
    found: List[str] = []
    for dirpath, _, files in os.walk(root):
        for name in files:
            if strip_archive_suffix(name):
                found.append(os.path.join(dirpath, name))
    found.sort()
    logger.debug("Found %d archives under %s", len(found), root)
    return found
