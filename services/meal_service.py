from typing import Any, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging
import math
import uuid

from domain.models import MealAttendance
from domain.enums import MealType
from repositories import MealAttendanceRepository
from services.service_day import DEFAULT_SERVICE_TIMEZONE, service_date
from app.exceptions import (
    ConflictError,
    ServiceValidationError,
    StoreUnavailableError,
)

logger = logging.getLogger("mealcheckin.meals")

ALLOWED_QUANTITIES = (1, 2)
INVALID_INPUT_MESSAGE = "Invalid guest ID or quantity"
DUPLICATE_MEAL_MESSAGE = "Guest already received a meal today"


def coerce_quantity(value: Any) -> Optional[int]:
    """
    Numeric value of a submitted quantity, or None if it is not a whole number.

    Accepts ints, integral floats and numeric strings. Booleans are rejected
    even though Python treats them as ints.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)
    return None


def parse_guest_id(value: Any) -> Optional[uuid.UUID]:
    """Guest identifier as a UUID, or None if absent or malformed"""
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        return None


class MealService:
    @staticmethod
    def validate_meal_request(guest_id: Any, quantity: Any) -> tuple[uuid.UUID, int]:
        """
        Validate a check-in submission before any store access.

        Returns:
            (guest UUID, quantity) with quantity in {1, 2}

        Raises:
            ServiceValidationError: If the guest ID is missing/malformed or the
                quantity is anything other than 1 or 2
        """
        gid = parse_guest_id(guest_id)
        qty = coerce_quantity(quantity)
        if gid is None or qty not in ALLOWED_QUANTITIES:
            raise ServiceValidationError(
                INVALID_INPUT_MESSAGE,
                details={"guestId": str(guest_id) if guest_id is not None else None},
            )
        return gid, qty

    @staticmethod
    def record_meal(
        db: Session,
        guest_id: Any,
        quantity: Any,
        tz_name: str = DEFAULT_SERVICE_TIMEZONE,
    ) -> MealAttendance:
        """
        Record one guest-category meal event for today.

        This method:
        1. Validates the guest ID and quantity (no store access on failure)
        2. Resolves today's service date
        3. Rejects the request if the guest already has a guest meal today
        4. Inserts the new attendance record

        A partial unique index on (guest_id, served_on) for guest meals backs
        up step 3; an insert that trips it is reported as the same conflict.

        Returns:
            MealAttendance: The stored record

        Raises:
            ServiceValidationError: Invalid guest ID or quantity
            ConflictError: Guest already received a meal today
            StoreUnavailableError: Store failure on the check or the insert
        """
        gid, qty = MealService.validate_meal_request(guest_id, quantity)
        today = service_date(tz_name=tz_name)
        meal_repo = MealAttendanceRepository(db)

        try:
            existing = meal_repo.find_for_guest_on(gid, today, MealType.GUEST)
        except SQLAlchemyError as e:
            logger.exception("Unable to check existing meal for guest %s", gid)
            raise StoreUnavailableError("Unable to validate meal history") from e

        if existing is not None:
            logger.info(f"Duplicate meal rejected for guest {gid} on {today}")
            raise ConflictError(DUPLICATE_MEAL_MESSAGE)

        try:
            meal = meal_repo.create_meal(
                guest_id=gid,
                meal_type=MealType.GUEST,
                quantity=qty,
                served_on=today,
            )
        except IntegrityError as e:
            db.rollback()
            if MealService._has_guest_meal(meal_repo, gid, today):
                logger.info(f"Concurrent duplicate meal rejected for guest {gid} on {today}")
                raise ConflictError(DUPLICATE_MEAL_MESSAGE) from e
            logger.exception("Unable to record meal for guest %s", gid)
            raise StoreUnavailableError("Unable to record meal") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Unable to record meal for guest %s", gid)
            raise StoreUnavailableError("Unable to record meal") from e

        logger.info(f"Recorded {qty} meal(s) for guest {gid} on {today}")
        return meal

    @staticmethod
    def _has_guest_meal(meal_repo: MealAttendanceRepository, gid: uuid.UUID, today) -> bool:
        try:
            return meal_repo.find_for_guest_on(gid, today, MealType.GUEST) is not None
        except SQLAlchemyError:
            logger.exception("Unable to re-check meal history for guest %s", gid)
            return False
