"""
Five-criterion book ratings and their per-book aggregates.

Each user rates a given book at most once. A rating is filed under one of the
user's libraries, created on demand by name, and keeps its scores when that
library is later deleted.
"""

import math

from sqlalchemy.orm import Session

from book_recommender.core.database import session_scope
from book_recommender.core.logging import get_context_logger, get_logger
from book_recommender.models.rating import Rating
from book_recommender.repositories import book_repository, library_repository, rating_repository
from book_recommender.schemas.rating import (
    SCORE_MAX,
    SCORE_MIN,
    Criterion,
    RatingCreate,
    RatingDetail,
    RatingFields,
    RatingOutcome,
    RatingRecord,
    RatingSummary,
)

logger = get_logger(__name__)


def _resolve_overall(fields: RatingFields) -> float | None:
    """The overall score to store, or None if the fields are inconsistent."""
    scores = list(fields.scores().values())
    if any(score < SCORE_MIN or score > SCORE_MAX for score in scores):
        return None

    mean = sum(scores) / len(scores)
    if fields.overall is None:
        return mean
    if not math.isclose(fields.overall, mean, abs_tol=1e-6):
        return None
    return mean


def _field_values(fields: RatingFields, overall: float) -> dict:
    values = fields.model_dump(exclude={"overall"}, include=set(RatingFields.model_fields))
    values["overall"] = overall
    return values


def is_already_rated(db: Session, book_id: int, user_id: str) -> bool:
    return rating_repository.exists(user_id, book_id, db=db)


def save_rating(db: Session, data: RatingCreate) -> RatingOutcome:
    """
    Record a user's rating of a book.

    Scores are validated and the duplicate check is made before anything is
    written. The library lookup-or-create and the insert share one
    transaction, so a failed insert leaves no stray library behind.
    """
    log = get_context_logger(__name__, user_id=data.user_id, book_id=data.book_id)

    overall = _resolve_overall(data)
    if overall is None:
        log.warning(f"Rating rejected: invalid scores {data.scores()} overall={data.overall}")
        return RatingOutcome.INVALID_SCORES

    library_name = data.library_name.strip()
    if not library_name or "/" in library_name:
        log.warning(f"Rating rejected: invalid library name {library_name!r}")
        return RatingOutcome.LIBRARY_UNAVAILABLE

    with session_scope(db):
        if rating_repository.exists(data.user_id, data.book_id, db=db):
            log.warning("Rating rejected: book already rated by this user")
            return RatingOutcome.ALREADY_RATED

        if not book_repository.book_exists(data.book_id, db=db):
            log.warning("Rating rejected: book not in catalogue")
            return RatingOutcome.NOT_FOUND

        library = library_repository.get_or_create_library(data.user_id, library_name, db=db)
        if library is None:
            log.warning(f"Rating rejected: library {library_name!r} unavailable")
            db.rollback()
            return RatingOutcome.LIBRARY_UNAVAILABLE

        rating = Rating(
            user_id=data.user_id,
            book_id=data.book_id,
            library_id=library.id,
            **_field_values(data, overall),
        )
        if rating_repository.insert_rating(rating, db=db) is None:
            # A concurrent save for the same (user, book) got there first
            db.rollback()
            return RatingOutcome.ALREADY_RATED

        db.commit()

    log.info(f"Rating saved in library {library_name!r} with overall {overall:.2f}")
    return RatingOutcome.SAVED


def load_for_book(db: Session, book_id: int) -> list[RatingRecord]:
    return [RatingRecord.model_validate(r) for r in rating_repository.list_for_book(book_id, db=db)]


def average_overall(db: Session, book_id: int) -> float:
    return rating_repository.average_overall(book_id, db=db)


def count_ratings(db: Session, book_id: int) -> int:
    return rating_repository.count_for_book(book_id, db=db)


def average_of(db: Session, criterion: Criterion, book_id: int) -> float:
    return rating_repository.average_of(Criterion(criterion).value, book_id, db=db)


def summarize_book(db: Session, book_id: int) -> RatingSummary:
    """Count, overall average and every criterion average for one book."""
    aggregate = rating_repository.aggregate_for_book(book_id, db=db)
    return RatingSummary(
        book_id=book_id,
        count=aggregate["count"],
        average_overall=aggregate["overall"],
        averages={criterion: aggregate[criterion.value] for criterion in Criterion},
    )


def list_detailed_by_user(db: Session, user_id: str) -> list[RatingDetail]:
    details = []
    for rating, book, library_name in rating_repository.list_detailed_by_user(user_id, db=db):
        record = RatingRecord.model_validate(rating)
        details.append(
            RatingDetail(
                **record.model_dump(),
                book_title=book.title,
                book_authors=book.authors,
                library_name=library_name,
            )
        )
    return details


def update_rating(db: Session, user_id: str, book_id: int, fields: RatingFields) -> RatingOutcome:
    """Replace every mutable field of an existing rating."""
    overall = _resolve_overall(fields)
    if overall is None:
        logger.warning(f"Rating update rejected: invalid scores for user={user_id} book={book_id}")
        return RatingOutcome.INVALID_SCORES

    with session_scope(db):
        updated = rating_repository.update_rating(
            user_id, book_id, _field_values(fields, overall), db=db
        )
        db.commit()

    if not updated:
        logger.warning(f"Rating update matched nothing: user={user_id} book={book_id}")
        return RatingOutcome.NOT_FOUND
    return RatingOutcome.SAVED


def delete_rating(db: Session, user_id: str, book_id: int) -> bool:
    with session_scope(db):
        deleted = rating_repository.delete_rating(user_id, book_id, db=db)
        db.commit()
    return deleted > 0
