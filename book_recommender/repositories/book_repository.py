"""Read-only queries over the book catalogue."""

from sqlalchemy.orm import Session

from book_recommender.core.database import session_scope
from book_recommender.models.book import Book


def get_book(book_id: int, db: Session | None = None) -> Book | None:
    with session_scope(db) as session:
        return session.get(Book, book_id)


def book_exists(book_id: int, db: Session | None = None) -> bool:
    with session_scope(db) as session:
        return session.query(Book.id).filter(Book.id == book_id).first() is not None


def search_by_title(title: str, db: Session | None = None) -> list[Book]:
    """Partial, case-insensitive match on the title. % and _ match literally."""
    with session_scope(db) as session:
        return (
            session.query(Book)
            .filter(Book.title.icontains(title, autoescape=True))
            .order_by(Book.title, Book.id)
            .all()
        )


def search_by_author(author: str, db: Session | None = None) -> list[Book]:
    """Partial, case-insensitive match on the authors field."""
    with session_scope(db) as session:
        return (
            session.query(Book)
            .filter(Book.authors.icontains(author, autoescape=True))
            .order_by(Book.title, Book.id)
            .all()
        )


def search_by_author_and_year(author: str, year: int, db: Session | None = None) -> list[Book]:
    with session_scope(db) as session:
        return (
            session.query(Book)
            .filter(Book.authors.icontains(author, autoescape=True), Book.publication_year == year)
            .order_by(Book.title, Book.id)
            .all()
        )
