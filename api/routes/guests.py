"""Guest directory routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db
from domain.schemas import GuestResponse, GuestSearchResponse, MessageResponse
from services import GuestService

router = APIRouter(prefix="/guests", tags=["Guests"])
logger = logging.getLogger("mealcheckin.api.guests")


@router.get(
    "",
    response_model=GuestSearchResponse,
    responses={500: {"model": MessageResponse}},
)
def search_guests(
    q: str = Query("", description="Name, preferred name or guest ID fragment"),
    db: Session = Depends(get_db),
):
    """
    Search guests for check-in.

    Queries shorter than two characters (after trimming) return an empty
    list. Otherwise up to ten guests whose full name, preferred name or
    external ID contains the query, ignoring case, ordered by full name.

    Examples:
    - GET /guests?q=ana - "Ana Ramirez", "Anabel Ortiz", ...
    - GET /guests?q=HC-10 - guests whose ID contains "HC-10"
    """
    guests = GuestService.search(db, q)
    logger.debug(f"Guest search {q!r} matched {len(guests)} guest(s)")
    return GuestSearchResponse(guests=[GuestResponse.model_validate(g) for g in guests])
