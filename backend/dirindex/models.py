"""Outcomes of resolving a request path against a document root."""

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import ClassVar, Union


@dataclass(frozen=True)
class ListingEntry:
    """One child of a listed directory."""

    name: str
    is_directory: bool
    size_bytes: int
    modified: datetime  # UTC


@dataclass(frozen=True)
class FileEntry:
    status_code: ClassVar[int] = 200

    path: Path
    request_path: str
    stat_result: os.stat_result


@dataclass(frozen=True)
class DirectoryEntry:
    status_code: ClassVar[int] = 200

    path: Path
    request_path: str
    segments: tuple[str, ...]  # Normalized, relative to the document root
    listing: list[ListingEntry] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return not self.segments


@dataclass(frozen=True)
class NotFound:
    """Absent, unreadable, or not a servable node."""

    status_code: ClassVar[int] = 404

    request_path: str


@dataclass(frozen=True)
class Forbidden:
    """The path climbs above the document root."""

    status_code: ClassVar[int] = 403

    request_path: str


@dataclass(frozen=True)
class BadRequest:
    """Malformed percent-encoding, invalid UTF-8 or an embedded null byte."""

    status_code: ClassVar[int] = 400

    request_path: str


ResolvedEntry = Union[FileEntry, DirectoryEntry, NotFound, Forbidden, BadRequest]
