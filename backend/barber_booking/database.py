from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config import settings


def build_engine(url: str, busy_timeout: float | None = None) -> Engine:
    """
    Create an engine for the booking store.

    SQLite gets check_same_thread=False (FastAPI runs sync endpoints in a
    thread pool), a busy timeout so concurrent writers queue on the write
    lock instead of failing immediately, and foreign keys switched on.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    timeout = settings.sqlite_busy_timeout if busy_timeout is None else busy_timeout
    engine = create_engine(
        url,
        connect_args={"check_same_thread": False, "timeout": timeout},
    )

    @event.listens_for(engine, "connect")
    def enable_sqlite_fk(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


engine = build_engine(settings.resolved_database_url)

# SessionLocal is the main way of talking to the store
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db(bind: Engine | None = None) -> None:
    """Create all tables and indexes from ORM metadata (dev / tests)."""
    from .models import Base

    Base.metadata.create_all(bind=bind or engine)


# FastAPI dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
