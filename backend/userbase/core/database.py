import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Base class for all database models
Base = declarative_base()

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, connection_record):
    # SQLite's built-in lower() folds ASCII only; replace it with Python's
    # so lower(name) agrees with str.lower() on the search fragment
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


class Database:
    """
    Process-wide database handle.

    Owns the engine (connection pool) and the session factory. It is opened
    once when the app starts and closed on shutdown; request handlers get
    sessions from it through the get_db dependency.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine = None
        self.SessionLocal = None

    def open(self) -> "Database":
        kwargs = {}
        if self.url.startswith("sqlite"):
            # SQLite connections are used from FastAPI's worker threads
            kwargs["connect_args"] = {"check_same_thread": False}
            if self.url in IN_MEMORY_SQLITE_URLS:
                # Every new connection would otherwise see an empty database
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(self.url, **kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _register_sqlite_functions)
        # autocommit=False: changes require explicit commit
        # autoflush=False: don't auto-flush before queries
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info(f"Database engine created for {self.engine.url.render_as_string(hide_password=True)}")
        return self

    def create_all(self) -> None:
        """Create tables for all models that inherit from Base (if missing)"""
        # Register models with Base.metadata
        from userbase.models import user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self.SessionLocal is None:
            raise RuntimeError("Database is not open")
        return self.SessionLocal()

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connection closed")
        self.engine = None
        self.SessionLocal = None


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for getting a database session.

    The session comes from the Database opened in the app lifespan and is
    closed once the request completes.
    """
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
