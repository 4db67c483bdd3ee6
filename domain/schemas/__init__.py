"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.guest_schemas import GuestResponse, GuestSearchResponse
from domain.schemas.meal_schemas import (
    MealCreateRequest,
    MealRecordedResponse,
    TotalsResponse,
    MessageResponse,
)

__all__ = [
    # Guest schemas
    "GuestResponse",
    "GuestSearchResponse",
    # Meal schemas
    "MealCreateRequest",
    "MealRecordedResponse",
    "TotalsResponse",
    "MessageResponse",
]
