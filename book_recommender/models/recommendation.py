from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from book_recommender.core.database import Base


class Recommendation(Base):
    """A user suggesting one book to readers of another, within a library."""

    __tablename__ = "recommendations"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "library_id",
            "read_book_id",
            "recommended_book_id",
            name="uq_recommendation_key",
        ),
        CheckConstraint(
            "read_book_id <> recommended_book_id", name="ck_recommendation_not_self"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.username", ondelete="CASCADE"), index=True
    )
    library_id: Mapped[int] = mapped_column(
        ForeignKey("libraries.id", ondelete="CASCADE"), index=True
    )
    read_book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), index=True)
    recommended_book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), index=True)

    comment: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    library: Mapped["Library"] = relationship(back_populates="recommendations")


# Forward reference
from book_recommender.models.library import Library  # noqa: E402, F811
