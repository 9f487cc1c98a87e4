import logging

from fastapi import APIRouter, HTTPException, Query, Request

from .listing import build_url, display_name
from .models import BadRequest, DirectoryEntry, Forbidden
from .resolver import SafeResolver
from .schemas import ListingEntryResponse, ListingResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/listing", tags=["listing"])


def get_resolver(request: Request) -> SafeResolver:
    return request.app.state.resolver


@router.get("", response_model=ListingResponse)
def get_listing(request: Request, path: str = Query("/")):
    # Sync endpoint: FastAPI runs it in the threadpool, so blocking
    # filesystem calls are fine here.
    entry = get_resolver(request).resolve_decoded(path)
    if isinstance(entry, BadRequest):
        raise HTTPException(status_code=400, detail="Bad request")
    if isinstance(entry, Forbidden):
        raise HTTPException(status_code=403, detail="Forbidden")
    if not isinstance(entry, DirectoryEntry):
        raise HTTPException(status_code=404, detail="Directory not found")

    logger.debug("Listing %s (%d entries)", entry.path, len(entry.listing))
    return ListingResponse(
        path="/" + "/".join(entry.segments),
        entries=[
            ListingEntryResponse(
                name=display_name(child.name),
                is_directory=child.is_directory,
                size_bytes=child.size_bytes,
                modified=child.modified,
                url=build_url("", (*entry.segments, child.name), child.is_directory),
            )
            for child in entry.listing
        ],
    )
