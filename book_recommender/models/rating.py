from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from book_recommender.core.database import Base

# Score columns, in display order
CRITERIA_COLUMNS = ("style", "content", "enjoyment", "originality", "edition")


class Rating(Base):
    """A user's five-criterion evaluation of a book. One per (user, book)."""

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_rating_user_book"),
        *(
            CheckConstraint(f"{column} BETWEEN 1 AND 5", name=f"ck_rating_{column}_range")
            for column in CRITERIA_COLUMNS
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.username", ondelete="CASCADE"), index=True
    )
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), index=True)
    library_id: Mapped[int | None] = mapped_column(
        ForeignKey("libraries.id", ondelete="SET NULL"), index=True
    )

    # Scores, 1-5
    style: Mapped[int] = mapped_column(Integer)
    content: Mapped[int] = mapped_column(Integer)
    enjoyment: Mapped[int] = mapped_column(Integer)
    originality: Mapped[int] = mapped_column(Integer)
    edition: Mapped[int] = mapped_column(Integer)

    # Per-criterion notes
    style_note: Mapped[str | None] = mapped_column(Text)
    content_note: Mapped[str | None] = mapped_column(Text)
    enjoyment_note: Mapped[str | None] = mapped_column(Text)
    originality_note: Mapped[str | None] = mapped_column(Text)
    edition_note: Mapped[str | None] = mapped_column(Text)

    overall: Mapped[float] = mapped_column(Float)  # Mean of the five scores
    final_comment: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    library: Mapped["Library"] = relationship(back_populates="ratings")


# Forward reference
from book_recommender.models.library import Library  # noqa: E402, F811
