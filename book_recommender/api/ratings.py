from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from book_recommender.core.database import get_db
from book_recommender.schemas.rating import (
    Criterion,
    RatingCreate,
    RatingDetail,
    RatingFields,
    RatingOutcome,
    RatingRecord,
    RatingSummary,
)
from book_recommender.services import rating_service

router = APIRouter()

REJECTION_STATUS = {
    RatingOutcome.INVALID_SCORES: (
        400,
        "Scores must be between 1 and 5 and overall must equal their mean",
    ),
    RatingOutcome.ALREADY_RATED: (409, "Book already rated by this user"),
    RatingOutcome.LIBRARY_UNAVAILABLE: (404, "Library could not be found or created"),
    RatingOutcome.NOT_FOUND: (404, "Rating or book not found"),
}


def _raise_for(outcome: RatingOutcome) -> None:
    if outcome in REJECTION_STATUS:
        status_code, detail = REJECTION_STATUS[outcome]
        raise HTTPException(status_code=status_code, detail=detail)


@router.post("/", status_code=status.HTTP_201_CREATED)
def save_rating(
    rating: RatingCreate,
    db: Session = Depends(get_db),
):
    """
    Rate a book on five criteria.

    The library is created on the fly if the user has none with that name.
    The overall score defaults to the mean of the five scores.
    """
    outcome = rating_service.save_rating(db, rating)
    _raise_for(outcome)
    return {"outcome": outcome}


@router.get("/books/{book_id}", response_model=list[RatingRecord])
def load_for_book(
    book_id: int,
    db: Session = Depends(get_db),
):
    """All ratings of a book."""
    return rating_service.load_for_book(db, book_id)


@router.get("/books/{book_id}/summary", response_model=RatingSummary)
def summarize_book(
    book_id: int,
    db: Session = Depends(get_db),
):
    """Rating count with overall and per-criterion averages."""
    return rating_service.summarize_book(db, book_id)


@router.get("/books/{book_id}/average")
def average_overall(
    book_id: int,
    db: Session = Depends(get_db),
):
    return {"book_id": book_id, "average": rating_service.average_overall(db, book_id)}


@router.get("/books/{book_id}/count")
def count_ratings(
    book_id: int,
    db: Session = Depends(get_db),
):
    return {"book_id": book_id, "count": rating_service.count_ratings(db, book_id)}


@router.get("/books/{book_id}/average/{criterion}")
def average_of(
    book_id: int,
    criterion: Criterion,
    db: Session = Depends(get_db),
):
    return {
        "book_id": book_id,
        "criterion": criterion,
        "average": rating_service.average_of(db, criterion, book_id),
    }


@router.get("/books/{book_id}/users/{user_id}/exists")
def is_already_rated(
    book_id: int,
    user_id: str,
    db: Session = Depends(get_db),
):
    return {"rated": rating_service.is_already_rated(db, book_id, user_id)}


@router.get("/users/{user_id}/detailed", response_model=list[RatingDetail])
def list_detailed_by_user(
    user_id: str,
    db: Session = Depends(get_db),
):
    """A user's ratings with book titles and library names, by title."""
    return rating_service.list_detailed_by_user(db, user_id)


@router.put("/users/{user_id}/books/{book_id}")
def update_rating(
    user_id: str,
    book_id: int,
    fields: RatingFields,
    db: Session = Depends(get_db),
):
    """Replace every score, note and comment of an existing rating."""
    outcome = rating_service.update_rating(db, user_id, book_id, fields)
    _raise_for(outcome)
    return {"outcome": outcome}


@router.delete("/users/{user_id}/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rating(
    user_id: str,
    book_id: int,
    db: Session = Depends(get_db),
):
    if not rating_service.delete_rating(db, user_id, book_id):
        raise HTTPException(status_code=404, detail="Rating not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
