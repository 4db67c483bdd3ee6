"""Meal check-in routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_app_settings, get_db
from app.config import Settings
from domain.schemas import MealCreateRequest, MealRecordedResponse, MessageResponse
from services import MealService

router = APIRouter(prefix="/meals", tags=["Meals"])
logger = logging.getLogger("mealcheckin.api.meals")


@router.post(
    "",
    response_model=MealRecordedResponse,
    responses={
        400: {"model": MessageResponse, "description": "Invalid guest ID or quantity"},
        409: {"model": MessageResponse, "description": "Guest already received a meal today"},
        500: {"model": MessageResponse},
    },
)
def record_meal(
    payload: MealCreateRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Record that a guest received one or two meals today.

    A guest gets at most one guest meal record per service day; a second
    submission on the same day is rejected with 409 and nothing is stored.

    Example:
    - POST /meals {"guestId": "3f1c...", "quantity": 2}
    """
    meal = MealService.record_meal(
        db, payload.guest_id, payload.quantity, tz_name=settings.service_timezone
    )
    logger.debug(f"Meal record {meal.id} stored")
    return MealRecordedResponse(success=True)
