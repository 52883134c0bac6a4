from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from book_recommender.core.database import get_db
from book_recommender.schemas.book import BookResponse
from book_recommender.services import book_service

router = APIRouter()


@router.get("/by-id", response_model=list[BookResponse])
def search_by_id(
    book_id: int = Query(..., alias="id", description="Catalogue id"),
    db: Session = Depends(get_db),
):
    """Id lookup shaped like the searches: an empty list when nothing matches."""
    return book_service.search_by_id(db, book_id)


@router.get("/by-title", response_model=list[BookResponse])
def search_by_title(
    q: str = Query(..., min_length=1, description="Part of the title"),
    db: Session = Depends(get_db),
):
    """Search books by title, case-insensitive."""
    return book_service.search_by_title(db, q)


@router.get("/by-author", response_model=list[BookResponse])
def search_by_author(
    q: str = Query(..., min_length=1, description="Part of an author name"),
    db: Session = Depends(get_db),
):
    """Search books by author, case-insensitive."""
    return book_service.search_by_author(db, q)


@router.get("/by-author-year", response_model=list[BookResponse])
def search_by_author_and_year(
    author: str = Query(..., min_length=1),
    year: int = Query(..., description="Exact publication year"),
    db: Session = Depends(get_db),
):
    return book_service.search_by_author_and_year(db, author, year)


@router.get("/{book_id}", response_model=BookResponse)
def get_book(
    book_id: int,
    db: Session = Depends(get_db),
):
    """Get book details by ID."""
    book = book_service.get_book(db, book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book
