"""
Data access for multi-criterion ratings and their per-book aggregates.
"""

from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from book_recommender.core.database import session_scope
from book_recommender.core.logging import get_logger
from book_recommender.models.book import Book
from book_recommender.models.library import Library
from book_recommender.models.rating import CRITERIA_COLUMNS, Rating

logger = get_logger(__name__)


def _key_filter(user_id: str, book_id: int):
    return Rating.user_id == user_id, Rating.book_id == book_id


def exists(user_id: str, book_id: int, db: Session | None = None) -> bool:
    with session_scope(db) as session:
        return session.query(Rating.id).filter(*_key_filter(user_id, book_id)).first() is not None


def insert_rating(rating: Rating, db: Session | None = None) -> Rating | None:
    """Insert a rating, or return None if a constraint rejects it."""
    with session_scope(db) as session:
        try:
            with session.begin_nested():
                session.add(rating)
        except IntegrityError:
            logger.warning(
                f"Rating insert rejected by constraint: user={rating.user_id} book={rating.book_id}"
            )
            return None

        logger.info(f"Rating {rating.id} saved: user={rating.user_id} book={rating.book_id}")
        return rating


def list_for_book(book_id: int, db: Session | None = None) -> list[Rating]:
    with session_scope(db) as session:
        return (
            session.query(Rating)
            .filter(Rating.book_id == book_id)
            .order_by(Rating.created_at, Rating.id)
            .all()
        )


def _average(session: Session, column, book_id: int) -> float:
    value = (
        session.query(func.coalesce(func.avg(column), 0.0))
        .filter(Rating.book_id == book_id)
        .scalar()
    )
    return float(value or 0.0)


def average_overall(book_id: int, db: Session | None = None) -> float:
    """Mean overall score for a book; 0.0 when unrated."""
    with session_scope(db) as session:
        return _average(session, Rating.overall, book_id)


def average_of(column: str, book_id: int, db: Session | None = None) -> float:
    """Mean of one score column for a book; 0.0 when unrated."""
    if column not in CRITERIA_COLUMNS:
        raise ValueError(f"Unknown rating criterion: {column}")

    with session_scope(db) as session:
        return _average(session, getattr(Rating, column), book_id)


def count_for_book(book_id: int, db: Session | None = None) -> int:
    with session_scope(db) as session:
        count = session.query(func.count(Rating.id)).filter(Rating.book_id == book_id).scalar()
        return count or 0


def aggregate_for_book(book_id: int, db: Session | None = None) -> dict[str, Any]:
    """Count, overall mean and every criterion mean in a single query."""
    columns = [func.avg(getattr(Rating, name)).label(name) for name in CRITERIA_COLUMNS]

    with session_scope(db) as session:
        row = (
            session.query(
                func.count(Rating.id).label("rating_count"),
                func.avg(Rating.overall).label("overall"),
                *columns,
            )
            .filter(Rating.book_id == book_id)
            .one()
        )

    return {
        "count": row.rating_count or 0,
        "overall": float(row.overall or 0.0),
        **{name: float(getattr(row, name) or 0.0) for name in CRITERIA_COLUMNS},
    }


def list_detailed_by_user(user_id: str, db: Session | None = None) -> list[tuple[Rating, Book, str | None]]:
    """A user's ratings with the book and the name of the library it was read in."""
    with session_scope(db) as session:
        rows = (
            session.query(Rating, Book, Library.name)
            .join(Book, Book.id == Rating.book_id)
            .outerjoin(Library, Library.id == Rating.library_id)
            .filter(Rating.user_id == user_id)
            .order_by(Book.title, Book.id)
            .all()
        )
        return [(rating, book, library_name) for rating, book, library_name in rows]


def update_rating(user_id: str, book_id: int, values: dict[str, Any], db: Session | None = None) -> int:
    """Replace the mutable fields of one rating. Returns rows affected."""
    with session_scope(db) as session:
        updated = (
            session.query(Rating)
            .filter(*_key_filter(user_id, book_id))
            .update(values, synchronize_session="fetch")
        )
        if updated:
            logger.info(f"Rating updated: user={user_id} book={book_id}")
        return updated


def delete_rating(user_id: str, book_id: int, db: Session | None = None) -> int:
    with session_scope(db) as session:
        deleted = (
            session.query(Rating)
            .filter(*_key_filter(user_id, book_id))
            .delete(synchronize_session="fetch")
        )
        if deleted:
            logger.info(f"Rating deleted: user={user_id} book={book_id}")
        return deleted
