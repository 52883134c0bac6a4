"""
Data access for book-to-book recommendations.
"""

from typing import NamedTuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from book_recommender.core.database import session_scope
from book_recommender.core.logging import get_logger
from book_recommender.models.book import Book
from book_recommender.models.library import Library
from book_recommender.models.recommendation import Recommendation

logger = get_logger(__name__)


class RecommendationKey(NamedTuple):
    """Full identity of a recommendation row."""

    user_id: str
    library_id: int
    read_book_id: int
    recommended_book_id: int


def _key_filter(key: RecommendationKey):
    return (
        Recommendation.user_id == key.user_id,
        Recommendation.library_id == key.library_id,
        Recommendation.read_book_id == key.read_book_id,
        Recommendation.recommended_book_id == key.recommended_book_id,
    )


def exists(key: RecommendationKey, db: Session | None = None) -> bool:
    with session_scope(db) as session:
        return session.query(Recommendation.id).filter(*_key_filter(key)).first() is not None


def insert_recommendation(
    key: RecommendationKey, comment: str | None, db: Session | None = None
) -> Recommendation | None:
    """Insert a recommendation, or return None if a constraint rejects it."""
    with session_scope(db) as session:
        recommendation = Recommendation(
            user_id=key.user_id,
            library_id=key.library_id,
            read_book_id=key.read_book_id,
            recommended_book_id=key.recommended_book_id,
            comment=comment,
        )
        try:
            with session.begin_nested():
                session.add(recommendation)
        except IntegrityError:
            logger.warning(f"Recommendation insert rejected by constraint: {key}")
            return None

        logger.info(f"Recommendation {recommendation.id} created: {key}")
        return recommendation


def recommended_book_ids(user_id: str, read_book_id: int, db: Session | None = None) -> set[int]:
    """Distinct books a user has recommended for a read book, across libraries."""
    with session_scope(db) as session:
        rows = (
            session.query(Recommendation.recommended_book_id)
            .filter(
                Recommendation.user_id == user_id,
                Recommendation.read_book_id == read_book_id,
            )
            .distinct()
            .all()
        )
        return {row.recommended_book_id for row in rows}


def count_given(user_id: str, read_book_id: int, db: Session | None = None) -> int:
    """How many distinct books a user has recommended for a read book."""
    with session_scope(db) as session:
        count = (
            session.query(func.count(func.distinct(Recommendation.recommended_book_id)))
            .filter(
                Recommendation.user_id == user_id,
                Recommendation.read_book_id == read_book_id,
            )
            .scalar()
        )
        return count or 0


def find_recommended(library_id: int, read_book_id: int, db: Session | None = None) -> list[Book]:
    """Distinct books recommended to readers of a book within one library."""
    with session_scope(db) as session:
        return (
            session.query(Book)
            .join(Recommendation, Recommendation.recommended_book_id == Book.id)
            .filter(
                Recommendation.library_id == library_id,
                Recommendation.read_book_id == read_book_id,
            )
            .distinct()
            .order_by(Book.title, Book.id)
            .all()
        )


def find_recommended_with_count(
    read_book_id: int,
    library_id: int | None = None,
    db: Session | None = None,
) -> list[tuple[Book, int]]:
    """Recommended books with how often each was suggested, most suggested first.

    Scoped to one library when library_id is given, otherwise across every
    library in which the read book has received recommendations.
    """
    with session_scope(db) as session:
        suggestions = func.count(Recommendation.id).label("suggestions")
        query = (
            session.query(Book, suggestions)
            .join(Recommendation, Recommendation.recommended_book_id == Book.id)
            .filter(Recommendation.read_book_id == read_book_id)
        )
        if library_id is not None:
            query = query.filter(Recommendation.library_id == library_id)

        rows = query.group_by(Book.id).order_by(suggestions.desc(), Book.title).all()
        return [(book, count) for book, count in rows]


def list_by_user(user_id: str, db: Session | None = None) -> list[Recommendation]:
    """A user's recommendations, newest first."""
    with session_scope(db) as session:
        return (
            session.query(Recommendation)
            .filter(Recommendation.user_id == user_id)
            .order_by(Recommendation.created_at.desc(), Recommendation.id.desc())
            .all()
        )


def list_detailed_by_user(user_id: str, db: Session | None = None) -> list:
    """A user's recommendations joined with titles, authors and library names."""
    read_book = aliased(Book)
    recommended_book = aliased(Book)

    with session_scope(db) as session:
        return (
            session.query(
                Recommendation.user_id,
                Recommendation.library_id,
                Library.name.label("library_name"),
                Recommendation.read_book_id,
                read_book.title.label("read_book_title"),
                read_book.authors.label("read_book_authors"),
                Recommendation.recommended_book_id,
                recommended_book.title.label("recommended_book_title"),
                recommended_book.authors.label("recommended_book_authors"),
                Recommendation.comment,
                Recommendation.created_at,
            )
            .join(Library, Library.id == Recommendation.library_id)
            .join(read_book, read_book.id == Recommendation.read_book_id)
            .join(recommended_book, recommended_book.id == Recommendation.recommended_book_id)
            .filter(Recommendation.user_id == user_id)
            .order_by(Library.name, read_book.title, recommended_book.title)
            .all()
        )


def update_comment(key: RecommendationKey, comment: str | None, db: Session | None = None) -> int:
    """Replace the comment on one recommendation. Returns rows affected."""
    with session_scope(db) as session:
        updated = (
            session.query(Recommendation)
            .filter(*_key_filter(key))
            .update({Recommendation.comment: comment}, synchronize_session="fetch")
        )
        if updated:
            logger.info(f"Recommendation comment updated: {key}")
        return updated


def delete_recommendation(key: RecommendationKey, db: Session | None = None) -> int:
    """Delete one recommendation. Returns rows affected."""
    with session_scope(db) as session:
        deleted = (
            session.query(Recommendation)
            .filter(*_key_filter(key))
            .delete(synchronize_session="fetch")
        )
        if deleted:
            logger.info(f"Recommendation deleted: {key}")
        return deleted
