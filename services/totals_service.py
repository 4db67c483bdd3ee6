from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from domain.enums import MealType
from repositories import MealAttendanceRepository
from services.service_day import DEFAULT_SERVICE_TIMEZONE, service_date
from app.exceptions import StoreUnavailableError

logger = logging.getLogger("mealcheckin.totals")


class TotalsService:
    @staticmethod
    def today_total(db: Session, tz_name: str = DEFAULT_SERVICE_TIMEZONE) -> int:
        """
        Number of guest-category meals served today.

        Sums the quantity of every guest meal recorded for today's service
        date; a missing quantity counts as zero and no records gives 0.

        Raises:
            StoreUnavailableError: If the store query fails
        """
        today = service_date(tz_name=tz_name)
        try:
            quantities = MealAttendanceRepository(db).get_quantities_on(
                today, MealType.GUEST
            )
        except SQLAlchemyError as e:
            logger.exception("Unable to load today's total for %s", today)
            raise StoreUnavailableError("Unable to load totals") from e

        return sum(q or 0 for q in quantities)
