from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import get_settings

settings = get_settings()


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Build an engine for the given URL.

    check_same_thread=False needed for SQLite with FastAPI.
    In-memory SQLite shares one connection so every session sees the same tables.
    """
    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


engine = make_engine(settings.database_url, echo=settings.debug)

# Session factory for database operations
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


def get_db():
    """
    Dependency that provides database session to route handlers.
    Ensures session is properly closed after request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None):
    """
    Initialize database schema.
    Creates all tables defined in models; existing tables are left alone.
    Call this on application startup.
    """
    # Models must be imported so their tables are registered on Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
