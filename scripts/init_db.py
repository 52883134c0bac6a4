"""
Initialize database tables.

Creates every table the models define, without going through Alembic.
Handy for local SQLite databases; deployments should run ``alembic upgrade head``.
Usage: python -m scripts.init_db
"""

from book_recommender.core.config import get_settings
from book_recommender.core.database import Base, engine
from book_recommender.core.logging import get_logger, setup_logging
from book_recommender.models import *  # noqa: F401, F403

logger = get_logger(__name__)


def init_db() -> None:
    """Create all database tables."""
    settings = get_settings()
    logger.info(f"Creating database tables ({settings.ENVIRONMENT})...")
    Base.metadata.create_all(bind=engine)
    logger.info(f"Created tables: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    setup_logging()
    init_db()
