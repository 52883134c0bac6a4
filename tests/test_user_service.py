"""Tests for registration and credential checks."""

from book_recommender.schemas.user import UserCreate
from book_recommender.services import user_service


def new_user(**overrides) -> UserCreate:
    data = {
        "username": "dave",
        "password": "open-sesame",
        "first_name": "Dave",
        "last_name": "Reader",
        "national_id": "DVDRDR83D04H501D",
        "email": "dave@example.com",
    }
    data.update(overrides)
    return UserCreate(**data)


class TestRegistration:
    """Test user registration."""

    def test_register(self, db):
        """Should register a new user."""
        assert user_service.register_user(db, new_user()) is True
        assert user_service.username_exists(db, "dave") is True

    def test_duplicate_username(self, db, test_users):
        """Should refuse a taken username."""
        assert user_service.register_user(db, new_user(username="alice")) is False

    def test_duplicate_email(self, db, test_users):
        """Should refuse a taken email."""
        assert user_service.register_user(db, new_user(email="bob@example.com")) is False
        assert user_service.username_exists(db, "dave") is False

    def test_duplicate_national_id(self, db, test_users):
        """Should refuse a taken national id."""
        assert user_service.register_user(db, new_user(national_id="ALCRDR80A01H501A")) is False


class TestAuthentication:
    """Test credential checks."""

    def test_correct_credential(self, db, test_users):
        """Should accept the registered credential."""
        assert user_service.authenticate(db, "alice", "alice-secret") is True

    def test_wrong_credential(self, db, test_users):
        """Should reject a wrong credential."""
        assert user_service.authenticate(db, "alice", "bob-secret") is False

    def test_unknown_user(self, db, test_users):
        """Should reject unknown users."""
        assert user_service.authenticate(db, "nobody", "anything") is False
