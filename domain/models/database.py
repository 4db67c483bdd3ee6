"""
Database configuration and session management.
"""

import logging
from typing import Callable, Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import Settings

logger = logging.getLogger("mealcheckin.database")

# Create SQLAlchemy Base
Base = declarative_base()


def create_store_engine(settings: Settings) -> Engine:
    """Create the engine for the backing store described by ``settings``."""
    url = settings.store_engine_url()
    if url.get_backend_name() == "sqlite":
        # Local/dev store: a single shared connection keeps in-memory data alive
        return create_engine(
            url,
            echo=settings.db_echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=settings.db_echo, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> Callable[[], Session]:
    """Session factory bound to ``engine``"""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_database(engine: Engine):
    """Initialize database schema"""
    # Import models so they're registered on Base.metadata
    from domain.models import guest, meal  # noqa: F401

    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn)
        logger.info("Database tables created successfully")


def get_db_session(request: Request) -> Generator[Session, None, None]:
    """Get database session (for FastAPI dependency injection)"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
