from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from book_recommender.core.config import get_settings
from book_recommender.core.exceptions import StoreUnavailableError

settings = get_settings()


def configure_sqlite(engine: Engine, begin: str = "BEGIN") -> Engine:
    """Enable foreign keys and SAVEPOINT support on a pysqlite engine.

    pysqlite manages BEGIN itself and gets it wrong for nested transactions,
    so the driver's handling is switched off and ``begin`` is emitted explicitly.
    Pass "BEGIN IMMEDIATE" to take the write lock up front.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql(begin)

    return engine


if settings.is_sqlite:
    engine = configure_sqlite(
        create_engine(settings.DATABASE_URL, connect_args={"check_same_thread": False})
    )
else:
    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )

SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)


class Base(DeclarativeBase):
    pass


def get_db():
    """Dependency for FastAPI routes to get a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(db: Session | None = None) -> Iterator[Session]:
    """Yield a session for a single data-access operation.

    With ``db`` given the caller owns the transaction: nothing is committed or
    rolled back here. Without it a new session is opened, committed on success,
    rolled back on failure and always closed.

    Store failures other than constraint violations are raised as
    StoreUnavailableError in both cases. IntegrityError passes through so that
    constraint-backed inserts can turn it into a domain outcome.
    """
    if db is not None:
        try:
            yield db
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            raise StoreUnavailableError(str(e)) from e
        return

    session = SessionLocal()
    try:
        yield session
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreUnavailableError(str(e)) from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
