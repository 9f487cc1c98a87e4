"""ASGI app serving files and generated directory indexes.

``DirectoryListing`` resolves every HTTP request against its document root.
Files are either handed to a configured pass-through app or streamed with
``FileResponse``; directories get an HTML index; everything else becomes a
plain-text 400/403/404.
"""

import logging
import os
from urllib.parse import quote, unquote

from starlette.concurrency import run_in_threadpool
from starlette.responses import FileResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

from .constants import (
    BAD_REQUEST_BODY,
    FORBIDDEN_BODY,
    HTML_MEDIA_TYPE,
    NOT_FOUND_BODY,
    PATH_SEGMENT_SAFE,
    TEXT_MEDIA_TYPE,
)
from .listing import render_listing
from .models import BadRequest, DirectoryEntry, FileEntry, Forbidden, NotFound, ResolvedEntry
from .resolver import SafeResolver, is_readable

logger = logging.getLogger(__name__)


def request_path(scope: Scope) -> str:
    """Percent-encoded request path relative to the mount prefix."""
    raw_path = scope.get("raw_path")
    if raw_path is None:
        path = quote(scope["path"])
    else:
        # Re-quote so raw non-ASCII bytes survive as escapes; existing
        # escapes and path delimiters are left untouched.
        path = quote(raw_path.split(b"?", 1)[0], safe=PATH_SEGMENT_SAFE + "/%")

    # raw_path never carries the server's own root path (uvicorn
    # --root-path); Mount records that outer part as app_root_path.
    root_path = scope.get("root_path", "")
    app_root_path = scope.get("app_root_path", "")
    if app_root_path and root_path.startswith(app_root_path):
        root_path = root_path[len(app_root_path):]
    root_path = root_path.rstrip("/")
    if not root_path:
        return path

    # Strip as many segments as the (decoded) prefix has, but only when
    # they really spell the prefix; some servers already strip it.
    depth = root_path.count("/")
    parts = path.split("/")
    if unquote("/".join(parts[: depth + 1])) != root_path:
        return path
    return "/" + "/".join(parts[depth + 1:])


def _script_name(scope: Scope) -> str:
    return scope.get("root_path", "")


class DirectoryListing:
    """Serve *root* as a browsable tree.

    When *app* is given, requests that resolve to a regular file are
    passed to it unchanged instead of being served here.
    """

    def __init__(
        self,
        root: str | os.PathLike,
        app: ASGIApp | None = None,
        *,
        show_hidden: bool = False,
    ) -> None:
        self.resolver = SafeResolver(root, show_hidden=show_hidden)
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            if self.app is not None:
                await self.app(scope, receive, send)
            return

        entry = await run_in_threadpool(self.resolver.resolve, request_path(scope))
        logger.debug(
            "%s %s -> %s", scope["method"], entry.request_path, type(entry).__name__
        )

        if isinstance(entry, FileEntry):
            if self.app is not None:
                await self.app(scope, receive, send)
            else:
                await self.send_file(scope, receive, send, entry)
            return

        response = await run_in_threadpool(self.build_response, scope, entry)
        await response(scope, receive, send)

    async def send_file(self, scope: Scope, receive: Receive, send: Send, entry: FileEntry) -> None:
        """Serve *entry* with FileResponse, falling back to 404 if it vanished.

        FileResponse stats the file again before sending any headers, so a
        file removed after resolution fails here instead of mid-body.
        """
        started = False

        async def tracking_send(message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        if await run_in_threadpool(is_readable, entry.path):
            try:
                await FileResponse(entry.path)(scope, receive, tracking_send)
                return
            except (OSError, RuntimeError):
                if started:
                    raise

        logger.info("File vanished or became unreadable before sending: %s", entry.path)
        response = self.build_response(scope, NotFound(request_path=entry.request_path))
        await response(scope, receive, send)

    def build_response(self, scope: Scope, entry: ResolvedEntry) -> Response:
        if isinstance(entry, DirectoryEntry):
            body = render_listing(entry, _script_name(scope))
            return _text_response(scope, entry.status_code, body, HTML_MEDIA_TYPE)
        if isinstance(entry, BadRequest):
            return _text_response(scope, entry.status_code, BAD_REQUEST_BODY, TEXT_MEDIA_TYPE)
        if isinstance(entry, Forbidden):
            return _text_response(scope, entry.status_code, FORBIDDEN_BODY, TEXT_MEDIA_TYPE)
        return _text_response(
            scope,
            entry.status_code,
            NOT_FOUND_BODY % entry.request_path,
            TEXT_MEDIA_TYPE,
            headers={"x-cascade": "pass"},
        )


def _text_response(
    scope: Scope,
    status_code: int,
    content: str,
    media_type: str,
    headers: dict[str, str] | None = None,
) -> Response:
    """Build a response whose content-length survives a HEAD request."""
    body = content.encode("utf-8")
    headers = dict(headers or {})
    headers["content-length"] = str(len(body))
    if scope["method"] == "HEAD":
        body = b""
    return Response(body, status_code=status_code, headers=headers, media_type=media_type)
