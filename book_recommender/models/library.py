from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from book_recommender.core.database import Base


class Library(Base):
    """A named, user-owned collection of books. Names are unique per user."""

    __tablename__ = "libraries"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_library_user_name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.username", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    user: Mapped["User"] = relationship(back_populates="libraries")
    entries: Mapped[list["LibraryBook"]] = relationship(
        back_populates="library",
        cascade="all, delete-orphan",
        order_by="LibraryBook.id",
    )
    recommendations: Mapped[list["Recommendation"]] = relationship(
        back_populates="library", cascade="all, delete-orphan"
    )
    # Ratings outlive the library they were made through
    ratings: Mapped[list["Rating"]] = relationship(back_populates="library")

    @property
    def book_ids(self) -> list[int]:
        return [entry.book_id for entry in self.entries]


class LibraryBook(Base):
    """Membership of a book in a library."""

    __tablename__ = "library_books"
    __table_args__ = (UniqueConstraint("library_id", "book_id", name="uq_library_book"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    library_id: Mapped[int] = mapped_column(
        ForeignKey("libraries.id", ondelete="CASCADE"), index=True
    )
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), index=True)
    inserted_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    library: Mapped["Library"] = relationship(back_populates="entries")


# Forward references
from book_recommender.models.rating import Rating  # noqa: E402
from book_recommender.models.recommendation import Recommendation  # noqa: E402
from book_recommender.models.user import User  # noqa: E402
