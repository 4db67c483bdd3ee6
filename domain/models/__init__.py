"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    create_store_engine,
    create_session_factory,
    init_database,
    get_db_session,
)
from domain.models.guest import Guest
from domain.models.meal import MealAttendance

__all__ = [
    # Database
    "Base",
    "create_store_engine",
    "create_session_factory",
    "init_database",
    "get_db_session",
    # Guest directory
    "Guest",
    # Meal attendance
    "MealAttendance",
]
