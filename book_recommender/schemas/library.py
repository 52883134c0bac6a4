from datetime import datetime

from pydantic import BaseModel, Field

# Library names travel as a single URL path segment
LIBRARY_NAME_PATTERN = r"^[^/]*$"


class LibraryCreate(BaseModel):
    name: str = Field(..., max_length=100, pattern=LIBRARY_NAME_PATTERN)


class LibraryRename(BaseModel):
    new_name: str = Field(..., max_length=100, pattern=LIBRARY_NAME_PATTERN)


class LibraryResponse(BaseModel):
    id: int
    user_id: str
    name: str
    created_at: datetime
    book_ids: list[int] = []

    class Config:
        from_attributes = True
