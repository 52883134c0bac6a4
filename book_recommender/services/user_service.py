"""
Account registration and credential checks.

The stored credential is opaque to this service: whatever the client sends
at registration is compared verbatim at login.
"""

import secrets

from sqlalchemy.orm import Session

from book_recommender.core.database import session_scope
from book_recommender.core.logging import get_logger
from book_recommender.models.user import User
from book_recommender.repositories import user_repository
from book_recommender.schemas.user import UserCreate

logger = get_logger(__name__)


def register_user(db: Session, data: UserCreate) -> bool:
    """Register a new user. False if the username, email or national id is taken."""
    with session_scope(db):
        conflict = user_repository.find_conflicting(
            data.username, data.email, data.national_id, db=db
        )
        if conflict is not None:
            logger.warning(f"Registration rejected for {data.username}: identity already in use")
            return False

        user = User(
            username=data.username,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            national_id=data.national_id,
            email=data.email,
        )
        if user_repository.insert_user(user, db=db) is None:
            return False

        db.commit()

    return True


def authenticate(db: Session, username: str, password: str) -> bool:
    user = user_repository.get_user(username, db=db)
    if user is None:
        logger.warning(f"Login failed: unknown user {username}")
        return False

    if not secrets.compare_digest(user.password.encode(), password.encode()):
        logger.warning(f"Login failed: wrong credential for {username}")
        return False

    return True


def username_exists(db: Session, username: str) -> bool:
    return user_repository.user_exists(username, db=db)
