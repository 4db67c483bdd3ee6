from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from domain.models import Guest
from repositories import GuestRepository
from app.exceptions import StoreUnavailableError

logger = logging.getLogger("mealcheckin.guests")

MIN_QUERY_LENGTH = 2
SEARCH_RESULT_LIMIT = 10


class GuestService:
    @staticmethod
    def search(db: Session, query: str) -> List[Guest]:
        """
        Search the guest directory for the check-in desk.

        The query is trimmed; anything shorter than two characters returns an
        empty list without touching the store. Otherwise guests whose full
        name, preferred name or external ID contains the query (ignoring
        case) are returned, ordered by full name, at most ten of them.

        Raises:
            StoreUnavailableError: If the store query fails
        """
        term = (query or "").strip()
        if len(term) < MIN_QUERY_LENGTH:
            return []

        try:
            return GuestRepository(db).search(term, limit=SEARCH_RESULT_LIMIT)
        except SQLAlchemyError as e:
            logger.exception("Guest search failed for query %r", term)
            raise StoreUnavailableError("Unable to search guests right now") from e
