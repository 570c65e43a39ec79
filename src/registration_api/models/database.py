"""Record store handle and per-request session dependency"""

import logging

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

# Register table metadata before create_all
from registration_api.models.registration import Registration  # noqa: F401

logger = logging.getLogger(__name__)


class RecordStore:
    """Explicitly constructed handle around the database engine.

    Created once at application startup; ``init`` creates the schema and
    ``close`` releases pooled connections.
    """

    def __init__(self, database_url: str, echo: bool = False):
        if not database_url:
            raise ValueError(
                "DATABASE_URL environment variable is not set. "
                "Set DATABASE_URL in the environment or local .env file."
            )
        self.database_url = database_url

        engine_kwargs = {"echo": echo}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory databases live in a single connection
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(database_url, **engine_kwargs)

    def init(self):
        """Create tables and indexes that do not exist yet"""
        SQLModel.metadata.create_all(self.engine)
        logger.info(f"Record store initialized ({self.engine.url.get_backend_name()})")

    def close(self):
        self.engine.dispose()
        logger.info("Record store closed")

    def session(self) -> Session:
        return Session(self.engine)


def get_db(request: Request):
    """Get database session bound to the application's record store"""
    store: RecordStore = request.app.state.store
    with store.session() as session:
        yield session
