"""Service configuration — all tuneable values in one place."""

import os

DIRINDEX_CONFIG = {
    "root": os.environ.get("DIRINDEX_ROOT", "."),
    "show_hidden": os.environ.get("DIRINDEX_SHOW_HIDDEN", "") in ("1", "true", "yes"),
    "host": os.environ.get("DIRINDEX_HOST", "127.0.0.1"),
    "port": int(os.environ.get("DIRINDEX_PORT", "8000")),
    "log_level": "info",
    "cors_origins": ["http://localhost:5173"],
}
