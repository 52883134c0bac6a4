from sqlalchemy.orm import Session

from book_recommender.repositories import book_repository
from book_recommender.schemas.book import BookResponse


def _to_responses(books) -> list[BookResponse]:
    return [BookResponse.model_validate(book) for book in books]


def get_book(db: Session, book_id: int) -> BookResponse | None:
    """Get a single book from the catalogue."""
    book = book_repository.get_book(book_id, db=db)
    return BookResponse.model_validate(book) if book else None


def search_by_id(db: Session, book_id: int) -> list[BookResponse]:
    """Id lookup shaped like the other searches: zero or one result."""
    book = book_repository.get_book(book_id, db=db)
    return _to_responses([book] if book else [])


def search_by_title(db: Session, title: str) -> list[BookResponse]:
    title = title.strip()
    if not title:
        return []
    return _to_responses(book_repository.search_by_title(title, db=db))


def search_by_author(db: Session, author: str) -> list[BookResponse]:
    author = author.strip()
    if not author:
        return []
    return _to_responses(book_repository.search_by_author(author, db=db))


def search_by_author_and_year(db: Session, author: str, year: int) -> list[BookResponse]:
    """Partial author match restricted to one publication year."""
    author = author.strip()
    if not author:
        return []
    return _to_responses(book_repository.search_by_author_and_year(author, year, db=db))
