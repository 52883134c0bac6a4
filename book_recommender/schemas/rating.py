from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from book_recommender.schemas.library import LIBRARY_NAME_PATTERN

SCORE_MIN = 1
SCORE_MAX = 5


class Criterion(str, Enum):
    """The five rated aspects of a book. Values are the score column names."""

    STYLE = "style"
    CONTENT = "content"
    ENJOYMENT = "enjoyment"
    ORIGINALITY = "originality"
    EDITION = "edition"


class RatingOutcome(str, Enum):
    SAVED = "saved"
    INVALID_SCORES = "invalid_scores"
    ALREADY_RATED = "already_rated"
    LIBRARY_UNAVAILABLE = "library_unavailable"
    NOT_FOUND = "not_found"


class RatingFields(BaseModel):
    """Mutable part of a rating: scores, notes and comments."""

    style: int
    content: int
    enjoyment: int
    originality: int
    edition: int

    style_note: str | None = None
    content_note: str | None = None
    enjoyment_note: str | None = None
    originality_note: str | None = None
    edition_note: str | None = None

    overall: float | None = None  # Defaults to the mean of the five scores
    final_comment: str | None = None

    def scores(self) -> dict[Criterion, int]:
        return {criterion: getattr(self, criterion.value) for criterion in Criterion}


class RatingCreate(RatingFields):
    user_id: str = Field(..., min_length=1)
    book_id: int = Field(..., gt=0)
    library_name: str = Field(..., min_length=1, max_length=100, pattern=LIBRARY_NAME_PATTERN)


class RatingRecord(BaseModel):
    """One stored rating, as shown in a book's full rating list."""

    user_id: str
    book_id: int
    library_id: int | None

    style: int
    content: int
    enjoyment: int
    originality: int
    edition: int

    style_note: str | None
    content_note: str | None
    enjoyment_note: str | None
    originality_note: str | None
    edition_note: str | None

    overall: float
    final_comment: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class RatingDetail(RatingRecord):
    book_title: str
    book_authors: str
    library_name: str | None


class RatingSummary(BaseModel):
    book_id: int
    count: int
    average_overall: float
    averages: dict[Criterion, float]
