"""
API dependencies for dependency injection
"""

from typing import Generator
from fastapi import Request
from sqlalchemy.orm import Session

from app.config import Settings
from domain.models import get_db_session


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session(request)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings
