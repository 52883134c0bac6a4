"""Data access for registered users."""

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from book_recommender.core.database import session_scope
from book_recommender.core.logging import get_logger
from book_recommender.models.user import User

logger = get_logger(__name__)


def get_user(username: str, db: Session | None = None) -> User | None:
    with session_scope(db) as session:
        return session.get(User, username)


def user_exists(username: str, db: Session | None = None) -> bool:
    with session_scope(db) as session:
        return session.query(User.username).filter(User.username == username).first() is not None


def find_conflicting(
    username: str, email: str, national_id: str, db: Session | None = None
) -> User | None:
    """Return a user sharing any of the unique identity fields, if one exists."""
    with session_scope(db) as session:
        return (
            session.query(User)
            .filter(
                or_(
                    User.username == username,
                    User.email == email,
                    User.national_id == national_id,
                )
            )
            .first()
        )


def insert_user(user: User, db: Session | None = None) -> User | None:
    """Insert a user, or return None if a uniqueness constraint rejects it."""
    with session_scope(db) as session:
        try:
            with session.begin_nested():
                session.add(user)
        except IntegrityError:
            logger.warning(f"User insert rejected by constraint: {user.username}")
            return None

        logger.info(f"User registered: {user.username}")
        return user
