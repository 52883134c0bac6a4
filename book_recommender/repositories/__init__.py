from book_recommender.repositories import (
    book_repository,
    library_repository,
    rating_repository,
    recommendation_repository,
    user_repository,
)

__all__ = [
    "book_repository",
    "library_repository",
    "rating_repository",
    "recommendation_repository",
    "user_repository",
]
