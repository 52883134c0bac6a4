"""
Library management: user-owned named collections of books.

Names are unique per user (not globally) and compared after trimming
surrounding whitespace. Lookups report "not found" as None/False/empty;
store failures propagate as StoreUnavailableError.
"""

from sqlalchemy.orm import Session

from book_recommender.core.database import session_scope
from book_recommender.core.logging import get_context_logger, get_logger
from book_recommender.repositories import book_repository, library_repository, user_repository
from book_recommender.schemas.library import LibraryResponse

logger = get_logger(__name__)


def _is_valid_name(name: str) -> bool:
    # Names are addressed as one URL path segment
    return bool(name) and "/" not in name


def _clean(value: str | None) -> str:
    return value.strip() if value else ""


def _to_response(library) -> LibraryResponse:
    return LibraryResponse(
        id=library.id,
        user_id=library.user_id,
        name=library.name,
        created_at=library.created_at,
        book_ids=library.book_ids,
    )


def create_library(db: Session, user_id: str, name: str) -> LibraryResponse | None:
    """Create a library for a user. None if the name is blank, contains "/", or is already used."""
    log = get_context_logger(__name__, user_id=user_id)
    user_id = _clean(user_id)
    name = _clean(name)

    if not user_id or not _is_valid_name(name):
        log.warning("Library creation rejected: empty user or invalid name")
        return None

    with session_scope(db):
        if not user_repository.user_exists(user_id, db=db):
            log.warning(f"Library creation rejected: unknown user {user_id}")
            return None

        if library_repository.name_exists(user_id, name, db=db):
            log.warning(f"Library creation rejected: name {name!r} already used")
            return None

        library = library_repository.insert_library(user_id, name, db=db)
        if library is None:
            # Lost a race with a concurrent create of the same name
            return None

        db.commit()

    log.info(f"Library {name!r} created with id {library.id}")
    return _to_response(library)


def add_book(db: Session, user_id: str, library_name: str, book_id: int) -> bool:
    """Add a book to a library. Already-present books count as success."""
    with session_scope(db):
        library = library_repository.get_library(_clean(user_id), _clean(library_name), db=db)
        if library is None:
            logger.warning(f"Library {library_name!r} not found for user {user_id}")
            return False

        if not book_repository.book_exists(book_id, db=db):
            logger.warning(f"Book {book_id} not found in catalogue")
            return False

        added = library_repository.add_book(library.id, book_id, db=db)
        db.commit()

    return added


def remove_book(db: Session, user_id: str, library_name: str, book_id: int) -> bool:
    """Remove a book from a library. False if the library or membership is missing."""
    with session_scope(db):
        library = library_repository.get_library(_clean(user_id), _clean(library_name), db=db)
        if library is None:
            logger.warning(f"Library {library_name!r} not found for user {user_id}")
            return False

        if not library_repository.is_member(library.id, book_id, db=db):
            logger.warning(f"Book {book_id} is not in library {library_name!r} of user {user_id}")
            return False

        removed = library_repository.remove_book(library.id, book_id, db=db)
        db.commit()

    return removed


def delete_library(db: Session, user_id: str, library_name: str) -> bool:
    with session_scope(db):
        library = library_repository.get_library(_clean(user_id), _clean(library_name), db=db)
        if library is None:
            logger.warning(f"Library {library_name!r} not found for user {user_id}")
            return False

        deleted = library_repository.delete_library(library.id, db=db)
        db.commit()

    if deleted:
        logger.info(f"Library {library_name!r} deleted for user {user_id}")
    return deleted


def rename_library(db: Session, user_id: str, library_name: str, new_name: str) -> bool:
    """Rename a library. False if not found, the new name is invalid, or it is taken."""
    new_name = _clean(new_name)
    if not _is_valid_name(new_name):
        return False

    with session_scope(db):
        library = library_repository.get_library(_clean(user_id), _clean(library_name), db=db)
        if library is None:
            logger.warning(f"Library {library_name!r} not found for user {user_id}")
            return False

        if new_name == library.name:
            return True

        if library_repository.name_exists(library.user_id, new_name, db=db):
            logger.warning(f"Rename rejected: {new_name!r} already used by {user_id}")
            return False

        renamed = library_repository.rename_library(library.id, new_name, db=db)
        db.commit()

    return renamed


def list_libraries(db: Session, user_id: str) -> list[str]:
    """Names of a user's libraries, alphabetically."""
    user_id = _clean(user_id)
    if not user_id:
        return []
    return [library.name for library in library_repository.list_libraries(user_id, db=db)]


def list_books_in_library(db: Session, user_id: str, library_name: str) -> list[int]:
    """Book ids in a library in insertion order; empty if the library is unknown."""
    library = library_repository.get_library(_clean(user_id), _clean(library_name), db=db)
    if library is None:
        return []
    return library_repository.list_book_ids(library.id, db=db)


def name_exists(db: Session, user_id: str, name: str) -> bool:
    return library_repository.name_exists(_clean(user_id), _clean(name), db=db)


def is_member(db: Session, library_id: int, book_id: int) -> bool:
    return library_repository.is_member(library_id, book_id, db=db)


def is_book_in_library(db: Session, user_id: str, library_name: str, book_id: int) -> bool:
    library = library_repository.get_library(_clean(user_id), _clean(library_name), db=db)
    if library is None:
        return False
    return library_repository.is_member(library.id, book_id, db=db)


def resolve_library_id(db: Session, user_id: str, library_name: str) -> int | None:
    """Numeric handle for a library, used to scope recommendations and ratings."""
    library = library_repository.get_library(_clean(user_id), _clean(library_name), db=db)
    return library.id if library else None


def get_library(db: Session, user_id: str, library_name: str) -> LibraryResponse | None:
    library = library_repository.get_library(_clean(user_id), _clean(library_name), db=db)
    return _to_response(library) if library else None
