"""Services package - Business logic layer"""

from services.guest_service import GuestService
from services.meal_service import MealService
from services.totals_service import TotalsService

# Note: service_day contains plain functions, not a class

__all__ = [
    "GuestService",
    "MealService",
    "TotalsService",
]
