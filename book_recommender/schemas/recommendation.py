from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from book_recommender.schemas.book import BookResponse


class RecommendationOutcome(str, Enum):
    """Result of trying to add a recommendation."""

    ADDED = "added"
    INVALID = "invalid"
    SELF_RECOMMENDATION = "self_recommendation"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    LIMIT_REACHED = "limit_reached"


class RecommendationCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    library_id: int = Field(..., gt=0)
    read_book_id: int = Field(..., gt=0)
    recommended_book_id: int = Field(..., gt=0)
    comment: str | None = Field(None, max_length=2000)


class CommentUpdate(BaseModel):
    comment: str | None = Field(None, max_length=2000)


class RecommendationResponse(BaseModel):
    user_id: str
    library_id: int
    read_book_id: int
    recommended_book_id: int
    comment: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class RecommendationDetail(RecommendationResponse):
    """A recommendation with display names for the books and library."""

    library_name: str
    read_book_title: str
    read_book_authors: str
    recommended_book_title: str
    recommended_book_authors: str


class RecommendedBook(BaseModel):
    book: BookResponse
    count: int  # How many times it was suggested


class RecommendationCount(BaseModel):
    user_id: str
    read_book_id: int
    count: int
    limit: int
