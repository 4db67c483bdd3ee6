"""
Check-in desk session: the client-side state machine.

A session belongs to one desk. It debounces search-as-you-type, applies only
the newest search's results, records meals for the selected guest, keeps a
short local history and an optimistic running total, and reconciles that
total with the server on a fixed interval.

Everything runs on one asyncio loop. Front ends observe the session through
the ``on_alert``, ``on_change`` and ``on_focus`` callbacks.
"""

import asyncio
import enum
import logging
from contextlib import suppress
from datetime import datetime
from typing import Callable, List, Optional, Set

from desk.api import CheckInApiClient, CheckInApiError, DuplicateMealError
from desk.models import GuestRecord, RecentMeal

logger = logging.getLogger("mealcheckin.desk.session")

MIN_QUERY_LENGTH = 2
MEAL_QUANTITIES = (1, 2)
GENERIC_FAILURE_ALERT = "Failed to record meal. Please try again."


class DeskState(str, enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RESULTS_SHOWN = "results_shown"
    GUEST_SELECTED = "guest_selected"
    SUBMITTING = "submitting"


class SubmitOutcome(str, enum.Enum):
    RECORDED = "recorded"
    DUPLICATE = "duplicate"
    FAILED = "failed"
    IGNORED = "ignored"


def _noop(*args):
    return None


class CheckInSession:
    def __init__(
        self,
        api: CheckInApiClient,
        debounce_seconds: float = 0.3,
        refresh_interval_seconds: float = 30.0,
        history_limit: int = 10,
        on_alert: Optional[Callable[[str], None]] = None,
        on_change: Optional[Callable[["CheckInSession"], None]] = None,
        on_focus: Optional[Callable[[], None]] = None,
    ):
        self.api = api
        self.debounce_seconds = debounce_seconds
        self.refresh_interval_seconds = refresh_interval_seconds
        self.history_limit = history_limit
        self.on_alert = on_alert or _noop
        self.on_change = on_change or _noop
        self.on_focus = on_focus or _noop

        self.query = ""
        self.results: List[GuestRecord] = []
        self.loading = False
        self.selected: Optional[GuestRecord] = None
        self.submitting = False
        self.total = 0
        self.recent: List[RecentMeal] = []

        self._search_generation = 0
        self._debounce_task: Optional[asyncio.Task] = None
        self._search_tasks: Set[asyncio.Task] = set()
        self._refresh_task: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "CheckInSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def state(self) -> DeskState:
        if self.submitting:
            return DeskState.SUBMITTING
        if self.selected is not None:
            return DeskState.GUEST_SELECTED
        if self.loading:
            return DeskState.SEARCHING
        if self.results:
            return DeskState.RESULTS_SHOWN
        return DeskState.IDLE

    def _changed(self):
        self.on_change(self)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def set_query(self, text: str):
        """Update the search text; the search itself waits for a pause in typing."""
        self.query = text
        self._cancel_debounce()
        self._debounce_task = asyncio.get_running_loop().create_task(
            self._debounce(text)
        )
        self._changed()

    def _cancel_debounce(self):
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def _debounce(self, text: str):
        await asyncio.sleep(self.debounce_seconds)
        self._debounce_task = None
        self._start_search(text)

    def _start_search(self, text: str):
        # Any newer search, short or not, supersedes the in-flight one
        self._search_generation += 1
        generation = self._search_generation
        term = text.strip()

        if len(term) < MIN_QUERY_LENGTH:
            self.results = []
            self.loading = False
            self._changed()
            return

        self.loading = True
        self._changed()
        task = asyncio.get_running_loop().create_task(self._search(term, generation))
        self._search_tasks.add(task)
        task.add_done_callback(self._search_tasks.discard)

    async def _search(self, term: str, generation: int):
        try:
            guests = await self.api.search_guests(term)
        except CheckInApiError as e:
            logger.warning("Error searching guests for %r: %s", term, e)
            guests = []

        if generation != self._search_generation:
            logger.debug("Discarding stale results for %r", term)
            return

        self.results = guests
        self.loading = False
        self._changed()

    async def wait_idle(self):
        """Wait until no search is pending: the debounce timer and any in-flight request."""
        while True:
            pending = [t for t in (self._debounce_task, *self._search_tasks) if t is not None]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Selection and submission
    # ------------------------------------------------------------------

    def select_guest(self, guest: GuestRecord):
        self.selected = guest
        self._changed()

    def select_index(self, index: int) -> GuestRecord:
        """Select the guest at ``index`` (0-based) in the current results"""
        guest = self.results[index]
        self.select_guest(guest)
        return guest

    def cancel(self):
        """Drop the selection without recording anything"""
        if self.selected is None:
            return
        self.selected = None
        self._changed()
        self.on_focus()

    async def submit(self, quantity: int) -> SubmitOutcome:
        """
        Record ``quantity`` meals for the selected guest.

        Ignored when nothing is selected or a submission is already running.
        On success the entry goes to the top of the recent list, the local
        total grows by ``quantity`` and the desk resets for the next guest.
        On a duplicate or any other failure the guest stays selected.
        """
        if quantity not in MEAL_QUANTITIES:
            raise ValueError(f"quantity must be one of {MEAL_QUANTITIES}, got {quantity!r}")
        guest = self.selected
        if guest is None or self.submitting:
            return SubmitOutcome.IGNORED

        self.submitting = True
        self._changed()
        try:
            await self.api.record_meal(guest.id, quantity)
        except DuplicateMealError:
            self.on_alert(f"{guest.full_name} has already received a meal today.")
            return SubmitOutcome.DUPLICATE
        except CheckInApiError as e:
            logger.error("Error recording meal for %s: %s", guest.id, e)
            self.on_alert(GENERIC_FAILURE_ALERT)
            return SubmitOutcome.FAILED
        finally:
            self.submitting = False
            self._changed()

        self.recent.insert(0, RecentMeal(guest=guest, quantity=quantity, time=datetime.now()))
        del self.recent[self.history_limit:]
        self.total += quantity

        self.selected = None
        self.query = ""
        self.results = []
        self.loading = False
        self._cancel_debounce()
        self._search_generation += 1
        self._changed()
        self.on_focus()
        return SubmitOutcome.RECORDED

    # ------------------------------------------------------------------
    # Daily total
    # ------------------------------------------------------------------

    async def refresh_total(self):
        """Replace the local total with the server's; failures keep the current value."""
        try:
            self.total = await self.api.get_today_total()
        except CheckInApiError as e:
            logger.error("Error loading today's total: %s", e)
            return
        self._changed()

    async def _refresh_periodically(self):
        while True:
            await asyncio.sleep(self.refresh_interval_seconds)
            await self.refresh_total()

    async def start(self):
        """Load today's total now and keep it fresh until close()"""
        await self.refresh_total()
        if self._refresh_task is None:
            self._refresh_task = asyncio.get_running_loop().create_task(
                self._refresh_periodically()
            )

    async def close(self):
        tasks = [t for t in (self._refresh_task, self._debounce_task, *self._search_tasks) if t is not None]
        for task in tasks:
            task.cancel()
        for task in tasks:
            with suppress(asyncio.CancelledError):
                await task
        self._refresh_task = None
        self._debounce_task = None
        self._search_tasks.clear()
