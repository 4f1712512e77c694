from typing import Generator, Optional
from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str, engine: Optional[Engine] = None):
        self.url = url
        if engine is None:
            connect_args = {}
            engine_kwargs = {}
            if url.startswith("sqlite"):
                connect_args["check_same_thread"] = False
                if ":memory:" in url or url == "sqlite://":
                    engine_kwargs["poolclass"] = StaticPool
            engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True, **engine_kwargs)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_fk)
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        """Create all tables registered on the declarative base."""
        # Registers every model on Base.metadata
        import app.models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self):
        import app.models  # noqa: F401
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()
        logger.info("Database engine disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session bound to the application's database."""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
