from book_recommender.services import (
    book_service,
    library_service,
    rating_service,
    recommendation_service,
    user_service,
)

__all__ = [
    "book_service",
    "library_service",
    "rating_service",
    "recommendation_service",
    "user_service",
]
