"""
Meal attendance models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Integer,
    Date,
    CheckConstraint,
    Index,
    Uuid,
    Enum as SQLEnum,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import MealType


class MealAttendance(Base):
    """A single recorded meal-service event"""

    __tablename__ = "meal_attendance"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Nullable: extra/rv/shelter meals are not tied to an identified guest
    guest_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("guests.id", ondelete="RESTRICT"),
        nullable=True,
    )
    meal_type = Column(
        SQLEnum(
            MealType,
            name="meal_type",
            values_callable=lambda enum_cls: [m.value for m in enum_cls],
        ),
        nullable=False,
    )
    quantity = Column(Integer, nullable=False, default=1)
    served_on = Column(Date, nullable=False)
    recorded_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    notes = Column(Text)

    guest = relationship("Guest", back_populates="meals")

    __table_args__ = (
        # One guest-category meal per guest per service day
        Index(
            "uq_meal_attendance_guest_daily",
            "guest_id",
            "served_on",
            unique=True,
            postgresql_where=text("meal_type = 'guest'"),
            sqlite_where=text("meal_type = 'guest'"),
        ),
        Index("ix_meal_attendance_served_on_type", "served_on", "meal_type"),
        CheckConstraint("quantity > 0", name="ck_meal_attendance_quantity_positive"),
    )

    def __repr__(self):
        return f"<MealAttendance {self.meal_type} guest={self.guest_id} on={self.served_on}>"
