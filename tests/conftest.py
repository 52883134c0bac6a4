"""
Pytest configuration and fixtures for backend tests.
"""

import os
from typing import Generator

# Settings are cached on first use, so point them at SQLite before any import
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from book_recommender.core.database import Base, SessionLocal, configure_sqlite, get_db
from book_recommender.main import app
from book_recommender.models import Book, Library, User

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = configure_sqlite(
    create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
)

# Repositories called without a session open their own from SessionLocal
SessionLocal.configure(bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    # Create all tables
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_user(username: str, national_id: str) -> User:
    return User(
        username=username,
        password=f"{username}-secret",
        first_name=username.capitalize(),
        last_name="Reader",
        national_id=national_id,
        email=f"{username}@example.com",
    )


@pytest.fixture
def test_users(db: Session) -> dict[str, User]:
    """Create alice, bob and carol."""
    users = {
        "alice": make_user("alice", "ALCRDR80A01H501A"),
        "bob": make_user("bob", "BBORDR81B02H501B"),
        "carol": make_user("carol", "CRLRDR82C03H501C"),
    }
    db.add_all(users.values())
    db.commit()
    return users


@pytest.fixture
def test_books(db: Session) -> dict[int, Book]:
    """Create a small catalogue keyed by book id."""
    books = [
        Book(id=101, title="Dune", authors="Frank Herbert", publication_year=1965),
        Book(id=202, title="Hyperion", authors="Dan Simmons", publication_year=1989),
        Book(id=303, title="Foundation", authors="Isaac Asimov", publication_year=1951),
        Book(id=404, title="I, Robot", authors="Isaac Asimov", publication_year=1950),
        Book(id=505, title="The Left Hand of Darkness", authors="Ursula K. Le Guin", publication_year=1969),
        Book(id=606, title="Dune Messiah", authors="Frank Herbert", publication_year=1969),
    ]
    db.add_all(books)
    db.commit()
    return {book.id: book for book in books}


@pytest.fixture
def library_7(db: Session, test_users: dict[str, User], test_books: dict[int, Book]) -> Library:
    """Carol's library with id 7, holding book 101."""
    library = Library(id=7, user_id="carol", name="Classics")
    db.add(library)
    db.commit()
    return library
