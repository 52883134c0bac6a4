from book_recommender.schemas.book import BookResponse
from book_recommender.schemas.library import LibraryCreate, LibraryRename, LibraryResponse
from book_recommender.schemas.rating import (
    Criterion,
    RatingCreate,
    RatingDetail,
    RatingFields,
    RatingOutcome,
    RatingRecord,
    RatingSummary,
)
from book_recommender.schemas.recommendation import (
    CommentUpdate,
    RecommendationCount,
    RecommendationCreate,
    RecommendationDetail,
    RecommendationOutcome,
    RecommendationResponse,
    RecommendedBook,
)
from book_recommender.schemas.user import LoginRequest, LoginResult, UserCreate, UserResponse

__all__ = [
    "BookResponse",
    "UserCreate",
    "UserResponse",
    "LoginRequest",
    "LoginResult",
    "LibraryCreate",
    "LibraryRename",
    "LibraryResponse",
    "RecommendationOutcome",
    "RecommendationCreate",
    "CommentUpdate",
    "RecommendationResponse",
    "RecommendationDetail",
    "RecommendedBook",
    "RecommendationCount",
    "Criterion",
    "RatingOutcome",
    "RatingFields",
    "RatingCreate",
    "RatingRecord",
    "RatingDetail",
    "RatingSummary",
]
