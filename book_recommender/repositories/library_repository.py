"""
Data access for libraries and their book memberships.

Every function accepts an optional session. Without one it runs in its own
short-lived transaction; with one it joins the caller's transaction and never
commits or rolls it back.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from book_recommender.core.database import session_scope
from book_recommender.core.logging import get_logger
from book_recommender.models.library import Library, LibraryBook

logger = get_logger(__name__)


def get_library(user_id: str, name: str, db: Session | None = None) -> Library | None:
    """Resolve a library by owner and name, with its member books loaded."""
    with session_scope(db) as session:
        return (
            session.query(Library)
            .options(selectinload(Library.entries))
            .populate_existing()
            .filter(Library.user_id == user_id, Library.name == name)
            .first()
        )


def get_library_by_id(library_id: int, db: Session | None = None) -> Library | None:
    with session_scope(db) as session:
        return (
            session.query(Library)
            .options(selectinload(Library.entries))
            .populate_existing()
            .filter(Library.id == library_id)
            .first()
        )


def list_libraries(user_id: str, db: Session | None = None) -> list[Library]:
    """All libraries owned by a user, ordered by name."""
    with session_scope(db) as session:
        return (
            session.query(Library)
            .options(selectinload(Library.entries))
            .filter(Library.user_id == user_id)
            .order_by(Library.name)
            .all()
        )


def name_exists(user_id: str, name: str, db: Session | None = None) -> bool:
    with session_scope(db) as session:
        return (
            session.query(Library.id)
            .filter(Library.user_id == user_id, Library.name == name)
            .first()
            is not None
        )


def insert_library(user_id: str, name: str, db: Session | None = None) -> Library | None:
    """Insert a library, or return None if the insert violates a constraint.

    The (user_id, name) uniqueness constraint makes this the atomic arbiter of
    duplicate names: of two concurrent inserts only one can succeed.
    """
    with session_scope(db) as session:
        library = Library(user_id=user_id, name=name, entries=[])
        try:
            with session.begin_nested():
                session.add(library)
        except IntegrityError:
            logger.warning(f"Library insert rejected by constraint: user={user_id} name={name!r}")
            return None

        logger.info(f"Library {library.id} created: user={user_id} name={name!r}")
        return library


def get_or_create_library(user_id: str, name: str, db: Session | None = None) -> Library | None:
    """Return the user's library with this name, creating it if needed.

    A losing racer's insert fails on the uniqueness constraint inside a
    savepoint and falls back to reading the winner's row. None only when the
    library neither exists nor can be created (e.g. unknown user).
    """
    with session_scope(db) as session:
        library = get_library(user_id, name, db=session)
        if library is not None:
            return library

        library = insert_library(user_id, name, db=session)
        if library is not None:
            return library

        return get_library(user_id, name, db=session)


def rename_library(library_id: int, new_name: str, db: Session | None = None) -> bool:
    """Rename a library. False if it does not exist or the name is taken."""
    with session_scope(db) as session:
        library = session.get(Library, library_id)
        if library is None:
            return False

        try:
            with session.begin_nested():
                library.name = new_name
        except IntegrityError:
            logger.warning(f"Library {library_id} rename to {new_name!r} rejected by constraint")
            session.refresh(library)
            return False

        logger.info(f"Library {library_id} renamed to {new_name!r}")
        return True


def delete_library(library_id: int, db: Session | None = None) -> bool:
    """Delete a library together with its memberships and scoped recommendations."""
    with session_scope(db) as session:
        library = session.get(Library, library_id)
        if library is None:
            return False

        session.delete(library)
        session.flush()
        logger.info(f"Library {library_id} deleted")
        return True


def is_member(library_id: int, book_id: int, db: Session | None = None) -> bool:
    with session_scope(db) as session:
        return (
            session.query(LibraryBook.id)
            .filter(LibraryBook.library_id == library_id, LibraryBook.book_id == book_id)
            .first()
            is not None
        )


def add_book(library_id: int, book_id: int, db: Session | None = None) -> bool:
    """Insert a membership. An existing membership counts as success."""
    with session_scope(db) as session:
        if is_member(library_id, book_id, db=session):
            return True

        try:
            with session.begin_nested():
                session.add(LibraryBook(library_id=library_id, book_id=book_id))
        except IntegrityError:
            # Either a concurrent insert of the same pair won, or a reference is dangling
            return is_member(library_id, book_id, db=session)

        logger.info(f"Book {book_id} added to library {library_id}")
        return True


def remove_book(library_id: int, book_id: int, db: Session | None = None) -> bool:
    with session_scope(db) as session:
        deleted = (
            session.query(LibraryBook)
            .filter(LibraryBook.library_id == library_id, LibraryBook.book_id == book_id)
            .delete(synchronize_session="fetch")
        )
        if deleted:
            logger.info(f"Book {book_id} removed from library {library_id}")
        return deleted > 0


def list_book_ids(library_id: int, db: Session | None = None) -> list[int]:
    """Member book ids in insertion order."""
    with session_scope(db) as session:
        rows = (
            session.query(LibraryBook.book_id)
            .filter(LibraryBook.library_id == library_id)
            .order_by(LibraryBook.inserted_at, LibraryBook.id)
            .all()
        )
        return [row.book_id for row in rows]
