from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from book_recommender.core.database import Base


class Book(Base):
    """Catalogue entry. Read-only for the service layer."""

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(String(500), index=True)
    authors: Mapped[str] = mapped_column(String(500), index=True)  # Comma-separated
    publication_year: Mapped[int | None] = mapped_column(Integer, index=True)

    # Metadata
    description: Mapped[str | None] = mapped_column(Text)
    categories: Mapped[str | None] = mapped_column(String(255))
    publisher: Mapped[str | None] = mapped_column(String(255))
    price: Mapped[str | None] = mapped_column(String(50))
