"""
Meal Attendance Repository - Data access layer for meal records
"""

from typing import List, Optional
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import and_

from repositories.base import BaseRepository
from domain.models import MealAttendance
from domain.enums import MealType


class MealAttendanceRepository(BaseRepository[MealAttendance]):
    """Repository for meal attendance data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealAttendance)

    def find_for_guest_on(
        self, guest_id: UUID, served_on: date, meal_type: MealType = MealType.GUEST
    ) -> Optional[MealAttendance]:
        """First record of ``meal_type`` for the guest on the given day, if any"""
        return (
            self.db.query(MealAttendance)
            .filter(
                and_(
                    MealAttendance.guest_id == guest_id,
                    MealAttendance.served_on == served_on,
                    MealAttendance.meal_type == meal_type,
                )
            )
            .first()
        )

    def create_meal(
        self,
        guest_id: Optional[UUID],
        meal_type: MealType,
        quantity: int,
        served_on: date,
        notes: str = None,
    ) -> MealAttendance:
        """Insert a new attendance record"""
        meal = MealAttendance(
            guest_id=guest_id,
            meal_type=meal_type,
            quantity=quantity,
            served_on=served_on,
            notes=notes,
        )
        return self.create(meal)

    def get_quantities_on(
        self, served_on: date, meal_type: MealType = MealType.GUEST
    ) -> List[Optional[int]]:
        """Quantities of every ``meal_type`` record served on the given day"""
        rows = (
            self.db.query(MealAttendance.quantity)
            .filter(
                MealAttendance.served_on == served_on,
                MealAttendance.meal_type == meal_type,
            )
            .all()
        )
        return [r.quantity for r in rows]
