"""
Guest directory model.
"""

from sqlalchemy import Column, Text, TIMESTAMP, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Guest(Base):
    """A person eligible for meal service (maintained by registration, read-only here)"""

    __tablename__ = "guests"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    external_id = Column(Text, unique=True, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    full_name = Column(Text, nullable=False, index=True)
    preferred_name = Column(Text)
    housing_status = Column(Text)
    age_group = Column(Text)
    gender = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    meals = relationship("MealAttendance", back_populates="guest", lazy="dynamic")

    @property
    def display_name(self) -> str:
        if self.preferred_name and self.preferred_name != self.full_name:
            return f"{self.preferred_name} ({self.full_name})"
        return self.full_name

    def __repr__(self):
        return f"<Guest {self.external_id} {self.full_name}>"
