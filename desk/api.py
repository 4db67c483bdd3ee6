"""
HTTP client for the MealCheckin API, as used by the check-in desk.
"""

import logging
from typing import Any, List, Optional
from uuid import UUID

import httpx
from pydantic import ValidationError

from desk.models import GuestRecord

logger = logging.getLogger("mealcheckin.desk.api")


class CheckInApiError(Exception):
    """Any failed API call: transport error, non-2xx status or malformed body"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class DuplicateMealError(CheckInApiError):
    """409 from POST /meals: the guest already received a meal today"""


class CheckInApiClient:
    """
    Thin async wrapper over the three check-in endpoints.

    Pass ``client`` to reuse an existing ``httpx.AsyncClient`` (tests hand in
    one bound to an ASGI or mock transport); otherwise one is created for
    ``base_url`` and closed by ``aclose()``.
    """

    def __init__(self, base_url: str = "http://localhost:8000", client: Optional[httpx.AsyncClient] = None):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url)

    async def __aenter__(self) -> "CheckInApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise CheckInApiError(f"{method} {path} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise CheckInApiError(
                f"{method} {path} returned a malformed body", response.status_code
            ) from e
        if not isinstance(payload, dict):
            raise CheckInApiError(
                f"{method} {path} returned an unexpected body", response.status_code
            )

        message = payload.get("message")
        if response.status_code == 409:
            raise DuplicateMealError(message or "Conflict", response.status_code)
        if response.is_error:
            raise CheckInApiError(
                message or f"{method} {path} failed with {response.status_code}",
                response.status_code,
            )
        return payload

    async def search_guests(self, query: str) -> List[GuestRecord]:
        payload = await self._request("GET", "/guests", params={"q": query})
        try:
            return [GuestRecord.model_validate(g) for g in payload.get("guests") or []]
        except (ValidationError, TypeError) as e:
            raise CheckInApiError("Guest search returned malformed guests") from e

    async def get_today_total(self) -> int:
        payload = await self._request("GET", "/totals")
        total: Any = payload.get("total")
        if total is None:
            return 0
        if isinstance(total, bool) or not isinstance(total, int):
            raise CheckInApiError(f"Totals returned a non-integer total: {total!r}")
        return total

    async def record_meal(self, guest_id: UUID, quantity: int) -> None:
        await self._request(
            "POST", "/meals", json={"guestId": str(guest_id), "quantity": quantity}
        )
        logger.debug("Recorded %d meal(s) for guest %s", quantity, guest_id)
