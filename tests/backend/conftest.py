import asyncio
import sys
from pathlib import Path
from urllib.parse import unquote

import pytest

# Make the backend directory (home of the dirindex package) importable
# from the tests/ directory.
_repo_root = str(Path(__file__).resolve().parents[2])
sys.path.insert(0, str(Path(_repo_root) / "backend"))

from starlette.responses import PlainTextResponse  # noqa: E402

from dirindex.middleware import DirectoryListing  # noqa: E402


async def file_catch(scope, receive, send):
    """Pass-through app standing in for a real file server."""
    response = PlainTextResponse("passed!")
    await response(scope, receive, send)


def _call_asgi(app, raw_path: str, method: str = "GET", root_path: str = ""):
    """Drive *app* with a hand-built scope.

    HTTP clients normalise literal ``..`` segments before sending, so
    traversal tests that need them on the wire go through here.
    Returns ``(status, headers, body)``.
    """
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": root_path + unquote(raw_path),
        "raw_path": (root_path + raw_path).encode("latin-1"),
        "root_path": root_path,
        "query_string": b"",
        "headers": [],
        "server": ("testserver", 80),
        "client": ("testclient", 50000),
    }
    messages = []

    async def receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message):
        messages.append(message)

    asyncio.run(app(scope, receive, send))
    start = messages[0]
    headers = {key.decode("latin-1"): value.decode("latin-1") for key, value in start["headers"]}
    body = b"".join(message.get("body", b"") for message in messages[1:])
    return start["status"], headers, body


@pytest.fixture()
def asgi_call():
    return _call_asgi


@pytest.fixture()
def docroot(tmp_path):
    """A document root shaped like a small site, plus a secret beside it.

    docroot/
      cgi/test                       (file)
      cgi/test+directory/test+file   (file)
      rackup/config.ru               (file)
    lib/secret.txt                   (outside the root)
    """
    root = tmp_path / "docroot"
    cgi = root / "cgi"
    (cgi / "test+directory").mkdir(parents=True)
    (cgi / "test").write_text("#!/bin/sh\necho test\n")
    (cgi / "test+directory" / "test+file").write_text("plus\n")
    (root / "rackup").mkdir()
    (root / "rackup" / "config.ru").write_text("run App\n")

    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "secret.txt").write_text("TOP SECRET")
    return root


@pytest.fixture()
def app(docroot):
    return DirectoryListing(docroot, file_catch)


@pytest.fixture()
def client(app):
    """Starlette TestClient around a DirectoryListing with a pass-through app."""
    from starlette.testclient import TestClient

    return TestClient(app)


@pytest.fixture()
def pass_through():
    return file_catch
