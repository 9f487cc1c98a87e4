from datetime import datetime

from pydantic import BaseModel


class ListingEntryResponse(BaseModel):
    name: str
    is_directory: bool
    size_bytes: int
    modified: datetime
    url: str


class ListingResponse(BaseModel):
    path: str
    entries: list[ListingEntryResponse]
