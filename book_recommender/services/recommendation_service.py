"""
Book-to-book recommendations made by users within a library.

A recommendation says "readers of book A should try book B". Rules, checked
before anything is written:

- a book cannot recommend itself;
- each (user, library, read book, recommended book) exists at most once;
- a user may recommend at most MAX_RECOMMENDATIONS_PER_BOOK distinct books for
  any one read book, counted across all their libraries.

The count-then-insert sequence for the cap is serialised per
(user, read book) within the process; the uniqueness and self-reference
constraints in the schema back up the other two rules.
"""

from sqlalchemy.orm import Session

from book_recommender.core.config import get_settings
from book_recommender.core.database import session_scope
from book_recommender.core.locks import KeyedLock
from book_recommender.core.logging import get_context_logger, get_logger
from book_recommender.repositories import (
    book_repository,
    library_repository,
    recommendation_repository,
    user_repository,
)
from book_recommender.repositories.recommendation_repository import RecommendationKey
from book_recommender.schemas.book import BookResponse
from book_recommender.schemas.recommendation import (
    RecommendationDetail,
    RecommendationOutcome,
    RecommendationResponse,
    RecommendedBook,
)

logger = get_logger(__name__)

_cap_locks = KeyedLock()


def _is_valid_key(user_id: str | None, *ids: int) -> bool:
    return bool(user_id and user_id.strip()) and all(i is not None and i > 0 for i in ids)


def add_recommendation(
    db: Session,
    user_id: str,
    library_id: int,
    read_book_id: int,
    recommended_book_id: int,
    comment: str | None = None,
) -> RecommendationOutcome:
    """Record that a user, having read one book, recommends another."""
    log = get_context_logger(
        __name__,
        user_id=user_id,
        library_id=library_id,
        read_book_id=read_book_id,
        recommended_book_id=recommended_book_id,
    )

    if not _is_valid_key(user_id, library_id, read_book_id, recommended_book_id):
        log.warning("Recommendation rejected: invalid identifiers")
        return RecommendationOutcome.INVALID

    if read_book_id == recommended_book_id:
        log.warning("Recommendation rejected: a book cannot recommend itself")
        return RecommendationOutcome.SELF_RECOMMENDATION

    limit = get_settings().MAX_RECOMMENDATIONS_PER_BOOK
    key = RecommendationKey(user_id, library_id, read_book_id, recommended_book_id)

    with _cap_locks.hold((user_id, read_book_id)), session_scope(db):
        if (
            not user_repository.user_exists(user_id, db=db)
            or library_repository.get_library_by_id(library_id, db=db) is None
            or not book_repository.book_exists(read_book_id, db=db)
            or not book_repository.book_exists(recommended_book_id, db=db)
        ):
            log.warning("Recommendation rejected: user, library or book not found")
            return RecommendationOutcome.NOT_FOUND

        if recommendation_repository.exists(key, db=db):
            log.warning("Recommendation rejected: already recorded")
            return RecommendationOutcome.DUPLICATE

        already_recommended = recommendation_repository.recommended_book_ids(
            user_id, read_book_id, db=db
        )
        if recommended_book_id not in already_recommended and len(already_recommended) >= limit:
            log.warning(f"Recommendation rejected: limit of {limit} reached for this book")
            return RecommendationOutcome.LIMIT_REACHED

        if recommendation_repository.insert_recommendation(key, comment, db=db) is None:
            return RecommendationOutcome.DUPLICATE

        db.commit()

    log.info("Recommendation added")
    return RecommendationOutcome.ADDED


def count_given(db: Session, user_id: str, read_book_id: int) -> int:
    """Distinct books this user has recommended for a read book."""
    return recommendation_repository.count_given(user_id, read_book_id, db=db)


def find_recommended(db: Session, library_id: int, read_book_id: int) -> list[BookResponse]:
    books = recommendation_repository.find_recommended(library_id, read_book_id, db=db)
    return [BookResponse.model_validate(book) for book in books]


def find_recommended_with_count(
    db: Session, read_book_id: int, library_id: int | None = None
) -> list[RecommendedBook]:
    """Recommended books with suggestion counts, most suggested first.

    With a library_id the counts cover that library only; without, every
    library where the read book has been recommended from.
    """
    rows = recommendation_repository.find_recommended_with_count(
        read_book_id, library_id=library_id, db=db
    )
    return [
        RecommendedBook(book=BookResponse.model_validate(book), count=count)
        for book, count in rows
    ]


def list_by_user(db: Session, user_id: str) -> list[RecommendationResponse]:
    recommendations = recommendation_repository.list_by_user(user_id, db=db)
    return [RecommendationResponse.model_validate(r) for r in recommendations]


def list_detailed_by_user(db: Session, user_id: str) -> list[RecommendationDetail]:
    """A user's recommendations with titles, authors and library names for display."""
    rows = recommendation_repository.list_detailed_by_user(user_id, db=db)
    return [RecommendationDetail.model_validate(dict(row._mapping)) for row in rows]


def update_comment(
    db: Session,
    user_id: str,
    library_id: int,
    read_book_id: int,
    recommended_book_id: int,
    comment: str | None,
) -> bool:
    """Replace a recommendation's comment. False when no such recommendation exists."""
    key = RecommendationKey(user_id, library_id, read_book_id, recommended_book_id)
    with session_scope(db):
        updated = recommendation_repository.update_comment(key, comment, db=db)
        db.commit()

    if not updated:
        logger.warning(f"Comment update matched no recommendation: {key}")
    return updated > 0


def delete_recommendation(
    db: Session,
    user_id: str,
    library_id: int,
    read_book_id: int,
    recommended_book_id: int,
) -> bool:
    """Delete a recommendation. False when no such recommendation exists."""
    key = RecommendationKey(user_id, library_id, read_book_id, recommended_book_id)
    with session_scope(db):
        deleted = recommendation_repository.delete_recommendation(key, db=db)
        db.commit()

    if not deleted:
        logger.warning(f"Delete matched no recommendation: {key}")
    return deleted > 0
