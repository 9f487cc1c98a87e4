from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import DIRINDEX_CONFIG
from .middleware import DirectoryListing
from .resolver import SafeResolver
from .router_listing import router as listing_router


def create_app(root=None, show_hidden: bool | None = None) -> FastAPI:
    if root is None:
        root = DIRINDEX_CONFIG["root"]
    if show_hidden is None:
        show_hidden = DIRINDEX_CONFIG["show_hidden"]

    app = FastAPI(title="Directory Index", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=DIRINDEX_CONFIG["cors_origins"],
        allow_methods=["GET", "HEAD"],
        allow_headers=["*"],
    )

    app.state.resolver = SafeResolver(root, show_hidden=show_hidden)
    app.include_router(listing_router)

    @app.get("/api/health")
    def health_check():
        return {"status": "ok"}

    # Registered last so the /api routes above take precedence.
    app.mount("/", DirectoryListing(root, show_hidden=show_hidden), name="files")
    return app


app = create_app()
