"""
Guest Repository - Data access layer for the guest directory
"""

from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import or_

from repositories.base import BaseRepository
from domain.models import Guest

LIKE_ESCAPE = "\\"


def _contains_pattern(term: str) -> str:
    """ILIKE pattern matching ``term`` anywhere, with LIKE wildcards taken literally"""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class GuestRepository(BaseRepository[Guest]):
    """Repository for guest directory data access"""

    def __init__(self, db: Session):
        super().__init__(db, Guest)

    def search(self, term: str, limit: int = 10) -> List[Guest]:
        """
        Case-insensitive partial match on full name, preferred name or external ID.

        Results are ordered by full name and capped at ``limit``.
        """
        pattern = _contains_pattern(term)
        return (
            self.db.query(Guest)
            .filter(
                or_(
                    Guest.full_name.ilike(pattern, escape=LIKE_ESCAPE),
                    Guest.preferred_name.ilike(pattern, escape=LIKE_ESCAPE),
                    Guest.external_id.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            .order_by(Guest.full_name.asc())
            .limit(limit)
            .all()
        )

    def get_by_external_id(self, external_id: str):
        """Get guest by human-facing code"""
        return self.db.query(Guest).filter(Guest.external_id == external_id).first()
