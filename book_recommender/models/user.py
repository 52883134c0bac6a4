from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from book_recommender.core.database import Base


class User(Base):
    """Registered user. The username is the identity key for every owned row."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), primary_key=True)
    password: Mapped[str] = mapped_column(String(255))  # Opaque credential

    # Profile
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    national_id: Mapped[str] = mapped_column(String(16), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    libraries: Mapped[list["Library"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )


# Forward reference for type hints
from book_recommender.models.library import Library  # noqa: E402
