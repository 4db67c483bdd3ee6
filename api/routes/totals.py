"""Daily totals routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import get_app_settings, get_db
from app.config import Settings
from domain.schemas import MessageResponse, TotalsResponse
from services import TotalsService

router = APIRouter(prefix="/totals", tags=["Totals"])


@router.get("", response_model=TotalsResponse, responses={500: {"model": MessageResponse}})
def get_today_total(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Guest meals served so far today"""
    total = TotalsService.today_total(db, tz_name=settings.service_timezone)
    return TotalsResponse(total=total)
