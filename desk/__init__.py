"""
Check-in desk client.

The session controller in ``desk.session`` talks to the MealCheckin API only
through ``desk.api``; ``desk.console`` is a terminal front end for it.
"""

from desk.api import CheckInApiClient, CheckInApiError, DuplicateMealError
from desk.config import DeskSettings
from desk.models import GuestRecord, RecentMeal
from desk.session import CheckInSession, DeskState, SubmitOutcome

__all__ = [
    "CheckInApiClient",
    "CheckInApiError",
    "DuplicateMealError",
    "DeskSettings",
    "GuestRecord",
    "RecentMeal",
    "CheckInSession",
    "DeskState",
    "SubmitOutcome",
]
