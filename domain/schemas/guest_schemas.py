from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID


class GuestResponse(BaseModel):
    """Guest record as returned by the directory search"""

    id: UUID
    external_id: str
    first_name: str
    last_name: str
    full_name: str
    preferred_name: Optional[str] = None
    housing_status: Optional[str] = None
    age_group: Optional[str] = None
    gender: Optional[str] = None

    model_config = {"from_attributes": True}


class GuestSearchResponse(BaseModel):
    """Search results, ordered by full name"""

    guests: List[GuestResponse] = Field(default_factory=list)
