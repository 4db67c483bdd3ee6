"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.guest_repository import GuestRepository
from repositories.meal_repository import MealAttendanceRepository

__all__ = [
    "BaseRepository",
    "GuestRepository",
    "MealAttendanceRepository",
]
