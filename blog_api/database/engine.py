from sqlmodel import create_engine, SQLModel, Session
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from fastapi import Request
from typing import Generator, Optional
import logging

logger = logging.getLogger(__name__)


class Database:
    """
    Pooled database access, created once per process.

    Lifecycle: ``connect()`` on startup, ``dispose()`` on shutdown. The
    instance lives on ``app.state`` and is handed to requests by ``get_db``.
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_recycle: int = 3600,
    ):
        self.url = url
        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_recycle = pool_recycle
        self._engine: Optional[Engine] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not connected. Call connect() on startup.")
        return self._engine

    def connect(self) -> Engine:
        if self._engine is not None:
            return self._engine

        options = {"echo": self.echo, "pool_pre_ping": True}
        if not self.url.startswith("sqlite"):
            options.update(
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_recycle=self.pool_recycle,
            )

        self._engine = create_engine(self.url, **options)
        return self._engine

    def dispose(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None

    def create_tables(self) -> None:
        """Create missing tables. Existing tables are left untouched."""
        # Registers the table models with SQLModel.metadata
        from blog_api.models import blog  # noqa: F401

        SQLModel.metadata.create_all(self.engine)
        logger.info("Database tables initialized")

    def ping(self) -> bool:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def session(self) -> Session:
        return Session(self.engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    database: Database = request.app.state.database
    with database.session() as session:
        yield session
