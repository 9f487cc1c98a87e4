"""HTML directory index pages.

Names end up in two places with different escaping rules: link targets
are URL-escaped one segment at a time (then HTML-escaped for the
attribute), display text is only HTML-escaped.
"""

import html
from email.utils import format_datetime
from urllib.parse import quote

from .constants import (
    DIRECTORY_SIZE_PLACEHOLDER,
    FILESIZE_FORMAT,
    PARENT_DIRECTORY_LABEL,
    PATH_SEGMENT_SAFE,
)
from .models import DirectoryEntry, ListingEntry

PAGE_HEADER = """<html><head>
  <title>{title}</title>
  <meta http-equiv="content-type" content="text/html; charset=utf-8" />
  <style type="text/css">
    table {{ width: 100%; }}
    .name {{ text-align: left; }}
    .size, .mtime {{ text-align: right; }}
    .type {{ width: 11em; }}
    .mtime {{ width: 15em; }}
  </style>
</head><body>
<h1>{title}</h1>
<hr />
<table>
  <tr>
    <th class="name">Name</th>
    <th class="size">Size</th>
    <th class="type">Type</th>
    <th class="mtime">Last Modified</th>
  </tr>
"""

PAGE_ROW = """  <tr>
    <td class="name"><a href="{href}">{name}</a></td>
    <td class="size">{size}</td>
    <td class="type">{type}</td>
    <td class="mtime">{mtime}</td>
  </tr>
"""

PAGE_FOOTER = """</table>
<hr />
</body></html>
"""


def display_name(name: str) -> str:
    # Undecodable filenames arrive surrogate-escaped from os.scandir.
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def escape_segment(segment: str) -> str:
    """URL-escape a single path segment for use in a link."""
    return quote(segment, safe=PATH_SEGMENT_SAFE, errors="surrogateescape")


def build_url(script_name: str, segments, trailing_slash: bool = False) -> str:
    """Absolute link to *segments* below the mount prefix *script_name*."""
    parts = [part for part in script_name.split("/") if part]
    parts.extend(segments)
    url = "/" + "/".join(escape_segment(part) for part in parts)
    if trailing_slash and not url.endswith("/"):
        url += "/"
    return url


def format_size(size: int) -> str:
    for template, threshold in FILESIZE_FORMAT:
        if size >= threshold:
            return template % (size / threshold)
    return f"{size}B"


def _row(href: str, name: str, size: str, kind: str, mtime: str) -> str:
    return PAGE_ROW.format(
        href=html.escape(href),
        name=html.escape(name),
        size=html.escape(size),
        type=kind,
        mtime=html.escape(mtime),
    )


def _entry_row(script_name: str, segments: tuple[str, ...], entry: ListingEntry) -> str:
    href = build_url(script_name, (*segments, entry.name), trailing_slash=entry.is_directory)
    if entry.is_directory:
        return _row(
            href,
            display_name(entry.name) + "/",
            DIRECTORY_SIZE_PLACEHOLDER,
            "directory",
            format_datetime(entry.modified, usegmt=True),
        )
    return _row(
        href,
        display_name(entry.name),
        format_size(entry.size_bytes),
        "file",
        format_datetime(entry.modified, usegmt=True),
    )


def render_listing(entry: DirectoryEntry, script_name: str = "") -> str:
    """Render the index page for a resolved directory."""
    shown = [part for part in script_name.split("/") if part]
    shown.extend(display_name(part) for part in entry.segments)
    title = "/" + "/".join(shown)
    if shown:
        title += "/"

    chunks = [PAGE_HEADER.format(title=html.escape(title))]
    if not entry.is_root:
        parent = build_url(script_name, entry.segments[:-1], trailing_slash=True)
        chunks.append(_row(parent, PARENT_DIRECTORY_LABEL, "", "", ""))
    for child in entry.listing:
        chunks.append(_entry_row(script_name, entry.segments, child))
    chunks.append(PAGE_FOOTER)
    return "".join(chunks)
