from book_recommender.models.book import Book
from book_recommender.models.library import Library, LibraryBook
from book_recommender.models.rating import Rating
from book_recommender.models.recommendation import Recommendation
from book_recommender.models.user import User

__all__ = [
    "User",
    "Book",
    "Library",
    "LibraryBook",
    "Recommendation",
    "Rating",
]
