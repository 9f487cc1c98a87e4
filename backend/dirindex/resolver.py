"""Safe resolution of request paths against a document root.

Traversal checks are pure segment arithmetic on the decoded path. Nothing
here hands a request-derived string to a glob or shell primitive, so
characters such as ``?`` and ``*`` always match literally.
"""

import logging
import os
import stat
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import unquote_to_bytes

from .models import (
    BadRequest,
    DirectoryEntry,
    FileEntry,
    Forbidden,
    ListingEntry,
    NotFound,
    ResolvedEntry,
)

logger = logging.getLogger(__name__)


def decode_path(raw_path: str) -> str | None:
    """Percent-decode *raw_path*.

    Returns None when the decoded bytes contain a null byte or are not
    valid UTF-8. ``+`` is left alone: in a path it is a literal plus.
    """
    decoded = unquote_to_bytes(raw_path)
    if b"\x00" in decoded:
        return None
    try:
        return decoded.decode("utf-8")
    except UnicodeDecodeError:
        return None


def normalize_segments(path: str) -> list[str] | None:
    """Collapse ``.`` and ``..`` segments of a decoded path.

    Returns None if a ``..`` would climb above the root. Climbing that
    stays inside (``cgi/../rackup``) is fine.
    """
    segments: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if not segments:
                return None
            segments.pop()
            continue
        segments.append(part)
    return segments


def is_readable(path: Path) -> bool:
    """Single capability check for "may this entry be served"."""
    return os.access(path, os.R_OK)


class SafeResolver:
    """Maps request paths onto a fixed document root."""

    def __init__(self, root: str | os.PathLike, show_hidden: bool = False) -> None:
        self.root = Path(root).resolve()
        self.show_hidden = show_hidden

    def resolve(self, raw_path: str) -> ResolvedEntry:
        """Resolve a percent-encoded request path."""
        decoded = decode_path(raw_path)
        if decoded is None:
            logger.info("Bad request path %r", raw_path)
            return BadRequest(request_path=raw_path)
        return self.resolve_decoded(decoded)

    def resolve_decoded(self, path: str) -> ResolvedEntry:
        """Resolve a path whose percent-encoding has already been removed."""
        if "\x00" in path:
            logger.info("Bad request path %r", path)
            return BadRequest(request_path=path)

        segments = normalize_segments(path)
        if segments is None:
            logger.warning("Blocked traversal above document root: %r", path)
            return Forbidden(request_path=path)

        candidate = self.root.joinpath(*segments)
        try:
            st = candidate.stat()
        except (OSError, ValueError):
            return NotFound(request_path=path)

        if not is_readable(candidate):
            logger.debug("Unreadable path %s", candidate)
            return NotFound(request_path=path)

        if stat.S_ISDIR(st.st_mode):
            try:
                listing = self.list_directory(candidate)
            except OSError:
                logger.debug("Could not list %s", candidate, exc_info=True)
                return NotFound(request_path=path)
            return DirectoryEntry(
                path=candidate,
                request_path=path,
                segments=tuple(segments),
                listing=listing,
            )

        if stat.S_ISREG(st.st_mode):
            return FileEntry(path=candidate, request_path=path, stat_result=st)

        # FIFOs, sockets and devices are never served.
        return NotFound(request_path=path)

    def list_directory(self, directory: Path) -> list[ListingEntry]:
        """Return the direct children of *directory*, sorted by name.

        Children that fail to stat (e.g. dangling symlinks) are skipped.
        """
        entries: list[ListingEntry] = []
        with os.scandir(directory) as it:
            for dirent in it:
                if not self.show_hidden and dirent.name.startswith("."):
                    continue
                try:
                    st = dirent.stat()
                except OSError:
                    logger.debug("Skipping entry that failed to stat: %s", dirent.path)
                    continue
                entries.append(
                    ListingEntry(
                        name=dirent.name,
                        is_directory=stat.S_ISDIR(st.st_mode),
                        size_bytes=st.st_size,
                        modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                    )
                )
        entries.sort(key=lambda entry: entry.name)
        return entries


def resolve(root: str | os.PathLike, raw_path: str) -> ResolvedEntry:
    """Resolve *raw_path* against *root* with a throw-away resolver."""
    return SafeResolver(root).resolve(raw_path)
