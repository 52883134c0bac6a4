from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from book_recommender.core.config import get_settings
from book_recommender.core.database import get_db
from book_recommender.schemas.book import BookResponse
from book_recommender.schemas.recommendation import (
    CommentUpdate,
    RecommendationCount,
    RecommendationCreate,
    RecommendationDetail,
    RecommendationOutcome,
    RecommendationResponse,
    RecommendedBook,
)
from book_recommender.services import recommendation_service

router = APIRouter()

# Rejections and the status code each is reported with
REJECTION_STATUS = {
    RecommendationOutcome.INVALID: (400, "Invalid recommendation identifiers"),
    RecommendationOutcome.SELF_RECOMMENDATION: (400, "A book cannot recommend itself"),
    RecommendationOutcome.NOT_FOUND: (404, "User, library or book not found"),
    RecommendationOutcome.DUPLICATE: (409, "Recommendation already exists"),
    RecommendationOutcome.LIMIT_REACHED: (409, "Recommendation limit reached for this book"),
}

RECOMMENDATION_NOT_FOUND = "Recommendation not found"


@router.post("/", status_code=status.HTTP_201_CREATED)
def add_recommendation(
    recommendation: RecommendationCreate,
    db: Session = Depends(get_db),
):
    """
    Recommend a book to readers of another book within a library.

    A user may recommend at most a fixed number of distinct books for any
    single read book.
    """
    outcome = recommendation_service.add_recommendation(
        db,
        recommendation.user_id,
        recommendation.library_id,
        recommendation.read_book_id,
        recommendation.recommended_book_id,
        recommendation.comment,
    )
    if outcome in REJECTION_STATUS:
        status_code, detail = REJECTION_STATUS[outcome]
        raise HTTPException(status_code=status_code, detail=detail)
    return {"outcome": outcome}


@router.get("/count", response_model=RecommendationCount)
def count_given(
    user_id: str = Query(..., min_length=1),
    read_book_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    """How many distinct books a user has recommended for a read book."""
    return RecommendationCount(
        user_id=user_id,
        read_book_id=read_book_id,
        count=recommendation_service.count_given(db, user_id, read_book_id),
        limit=get_settings().MAX_RECOMMENDATIONS_PER_BOOK,
    )


@router.get("/libraries/{library_id}/books/{read_book_id}", response_model=list[BookResponse])
def find_recommended(
    library_id: int,
    read_book_id: int,
    db: Session = Depends(get_db),
):
    return recommendation_service.find_recommended(db, library_id, read_book_id)


@router.get(
    "/libraries/{library_id}/books/{read_book_id}/counts",
    response_model=list[RecommendedBook],
)
def find_recommended_with_count_in_library(
    library_id: int,
    read_book_id: int,
    db: Session = Depends(get_db),
):
    """Books recommended within one library, most suggested first."""
    return recommendation_service.find_recommended_with_count(
        db, read_book_id, library_id=library_id
    )


@router.get("/books/{read_book_id}/counts", response_model=list[RecommendedBook])
def find_recommended_with_count(
    read_book_id: int,
    db: Session = Depends(get_db),
):
    """Books recommended across all libraries, most suggested first."""
    return recommendation_service.find_recommended_with_count(db, read_book_id)


@router.get("/users/{user_id}", response_model=list[RecommendationResponse])
def list_by_user(
    user_id: str,
    db: Session = Depends(get_db),
):
    return recommendation_service.list_by_user(db, user_id)


@router.get("/users/{user_id}/detailed", response_model=list[RecommendationDetail])
def list_detailed_by_user(
    user_id: str,
    db: Session = Depends(get_db),
):
    """A user's recommendations with book titles and library names."""
    return recommendation_service.list_detailed_by_user(db, user_id)


@router.patch(
    "/users/{user_id}/libraries/{library_id}/books/{read_book_id}/{recommended_book_id}"
)
def update_comment(
    user_id: str,
    library_id: int,
    read_book_id: int,
    recommended_book_id: int,
    update: CommentUpdate,
    db: Session = Depends(get_db),
):
    updated = recommendation_service.update_comment(
        db, user_id, library_id, read_book_id, recommended_book_id, update.comment
    )
    if not updated:
        raise HTTPException(status_code=404, detail=RECOMMENDATION_NOT_FOUND)
    return {"status": "updated"}


@router.delete(
    "/users/{user_id}/libraries/{library_id}/books/{read_book_id}/{recommended_book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_recommendation(
    user_id: str,
    library_id: int,
    read_book_id: int,
    recommended_book_id: int,
    db: Session = Depends(get_db),
):
    deleted = recommendation_service.delete_recommendation(
        db, user_id, library_id, read_book_id, recommended_book_id
    )
    if not deleted:
        raise HTTPException(status_code=404, detail=RECOMMENDATION_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
