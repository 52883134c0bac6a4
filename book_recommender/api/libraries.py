"""
Routes for a user's libraries and their member books.

Libraries are addressed by owner and name; the numeric id returned by
``/{name}/id`` is the handle recommendations and membership checks use.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from book_recommender.core.database import get_db
from book_recommender.schemas.library import LibraryCreate, LibraryRename, LibraryResponse
from book_recommender.services import library_service, user_service

router = APIRouter()

LIBRARY_NOT_FOUND = "Library not found"


@router.post(
    "/users/{user_id}/libraries",
    response_model=LibraryResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_library(
    user_id: str,
    library_data: LibraryCreate,
    db: Session = Depends(get_db),
):
    """Create a named library for a user."""
    if not library_data.name.strip():
        raise HTTPException(status_code=400, detail="Library name must not be blank")

    if not user_service.username_exists(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    library = library_service.create_library(db, user_id, library_data.name)
    if library is None:
        raise HTTPException(status_code=409, detail="Library name already in use")
    return library


@router.get("/users/{user_id}/libraries", response_model=list[str])
def list_libraries(
    user_id: str,
    db: Session = Depends(get_db),
):
    """Names of the user's libraries, alphabetically."""
    return library_service.list_libraries(db, user_id)


@router.get("/users/{user_id}/libraries/{name}/exists")
def library_exists(
    user_id: str,
    name: str,
    db: Session = Depends(get_db),
):
    return {"exists": library_service.name_exists(db, user_id, name)}


@router.get("/users/{user_id}/libraries/{name}/id")
def get_library_id(
    user_id: str,
    name: str,
    db: Session = Depends(get_db),
):
    library_id = library_service.resolve_library_id(db, user_id, name)
    if library_id is None:
        raise HTTPException(status_code=404, detail=LIBRARY_NOT_FOUND)
    return {"library_id": library_id}


@router.patch("/users/{user_id}/libraries/{name}", response_model=LibraryResponse)
def rename_library(
    user_id: str,
    name: str,
    rename: LibraryRename,
    db: Session = Depends(get_db),
):
    """Rename a library, keeping its books, recommendations and ratings."""
    if not rename.new_name.strip():
        raise HTTPException(status_code=400, detail="Library name must not be blank")

    if library_service.get_library(db, user_id, name) is None:
        raise HTTPException(status_code=404, detail=LIBRARY_NOT_FOUND)

    if not library_service.rename_library(db, user_id, name, rename.new_name):
        raise HTTPException(status_code=409, detail="Library name already in use")
    return library_service.get_library(db, user_id, rename.new_name)


@router.delete("/users/{user_id}/libraries/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_library(
    user_id: str,
    name: str,
    db: Session = Depends(get_db),
):
    """Delete a library with its memberships and recommendations."""
    if not library_service.delete_library(db, user_id, name):
        raise HTTPException(status_code=404, detail=LIBRARY_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users/{user_id}/libraries/{name}/books", response_model=list[int])
def list_books(
    user_id: str,
    name: str,
    db: Session = Depends(get_db),
):
    """Book ids in the library, in the order they were added."""
    if library_service.resolve_library_id(db, user_id, name) is None:
        raise HTTPException(status_code=404, detail=LIBRARY_NOT_FOUND)
    return library_service.list_books_in_library(db, user_id, name)


@router.put("/users/{user_id}/libraries/{name}/books/{book_id}")
def add_book(
    user_id: str,
    name: str,
    book_id: int,
    db: Session = Depends(get_db),
):
    if not library_service.add_book(db, user_id, name, book_id):
        raise HTTPException(status_code=404, detail="Library or book not found")
    return {"library": name, "book_id": book_id, "member": True}


@router.get("/users/{user_id}/libraries/{name}/books/{book_id}")
def is_book_in_library(
    user_id: str,
    name: str,
    book_id: int,
    db: Session = Depends(get_db),
):
    return {"member": library_service.is_book_in_library(db, user_id, name, book_id)}


@router.delete(
    "/users/{user_id}/libraries/{name}/books/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remove_book(
    user_id: str,
    name: str,
    book_id: int,
    db: Session = Depends(get_db),
):
    if not library_service.remove_book(db, user_id, name, book_id):
        raise HTTPException(status_code=404, detail="Book not in library")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/libraries/{library_id}/books/{book_id}")
def is_member(
    library_id: int,
    book_id: int,
    db: Session = Depends(get_db),
):
    """Membership check by library id."""
    return {"member": library_service.is_member(db, library_id, book_id)}
