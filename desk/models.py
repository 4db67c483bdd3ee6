from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class GuestRecord(BaseModel):
    """Guest as returned by GET /guests"""

    id: UUID
    external_id: str
    first_name: str
    last_name: str
    full_name: str
    preferred_name: Optional[str] = None
    housing_status: Optional[str] = None
    age_group: Optional[str] = None
    gender: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Preferred name with the full name in parentheses when they differ"""
        if self.preferred_name and self.preferred_name != self.full_name:
            return f"{self.preferred_name} ({self.full_name})"
        return self.full_name

    @property
    def short_name(self) -> str:
        return self.preferred_name or self.full_name


@dataclass
class RecentMeal:
    """A check-in recorded from this desk"""

    guest: GuestRecord
    quantity: int
    time: datetime = field(default_factory=datetime.now)

    @property
    def time_label(self) -> str:
        return self.time.strftime("%I:%M:%S %p")

    @property
    def quantity_label(self) -> str:
        return f"{self.quantity} meal{'s' if self.quantity > 1 else ''}"
