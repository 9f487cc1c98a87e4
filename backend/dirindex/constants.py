"""Centralised constants for the dirindex package.

Fixed values shared by the resolver, the listing renderer and the
middleware live here. Tuneable values belong in ``config.py``.
"""

# ── Content types ─────────────────────────────────────────────────────

HTML_MEDIA_TYPE: str = "text/html"
TEXT_MEDIA_TYPE: str = "text/plain"

# ── URL escaping ──────────────────────────────────────────────────────

# RFC 3986 pchar minus the unreserved set, which quote() never escapes.
# Everything else (space, "/", "?", "#", "%", non-ASCII) is percent-encoded.
PATH_SEGMENT_SAFE: str = "!$&'()*+,;=:@"

# ── Listing page ──────────────────────────────────────────────────────

# Binary thresholds, largest first.
FILESIZE_FORMAT: tuple[tuple[str, int], ...] = (
    ("%.1fT", 1 << 40),
    ("%.1fG", 1 << 30),
    ("%.1fM", 1 << 20),
    ("%.1fK", 1 << 10),
)

DIRECTORY_SIZE_PLACEHOLDER: str = "-"
PARENT_DIRECTORY_LABEL: str = "Parent Directory"

# ── Error bodies ──────────────────────────────────────────────────────

BAD_REQUEST_BODY: str = "Bad Request\n"
FORBIDDEN_BODY: str = "Forbidden\n"
NOT_FOUND_BODY: str = "Entity not found: %s\n"
