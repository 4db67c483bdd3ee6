from pydantic import BaseModel, Field
from typing import Any, Optional


class MealCreateRequest(BaseModel):
    """
    Body of POST /meals.

    Fields are deliberately loose: quantity may arrive as a number or a
    numeric string, and MealService decides what is valid so that every
    rejection has the same 400 shape.
    """

    guest_id: Optional[Any] = Field(None, alias="guestId")
    quantity: Optional[Any] = None

    model_config = {"populate_by_name": True}


class MealRecordedResponse(BaseModel):
    success: bool = True


class TotalsResponse(BaseModel):
    """Guest-category meals served today"""

    total: int = Field(..., ge=0)


class MessageResponse(BaseModel):
    """Error body shared by every endpoint"""

    message: str
