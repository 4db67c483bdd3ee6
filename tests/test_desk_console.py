"""
Console desk tests: screen rendering, command handling, and a full check-in
against the real application served in-process.
"""

import httpx
import pytest

from desk.api import CheckInApiClient
from desk.console import ConsoleDesk, render
from desk.models import GuestRecord
from desk.session import CheckInSession, DeskState
from test_fixtures import guest_payload, make_directory, make_meal


class EmptyApi:
    async def search_guests(self, query):
        return []

    async def record_meal(self, guest_id, quantity):
        return None

    async def get_today_total(self):
        return 0


def record(full_name, preferred_name=None, external_id="HC-1001") -> GuestRecord:
    return GuestRecord.model_validate(guest_payload(full_name, preferred_name, external_id))


async def test_render_idle_screen_shows_total():
    session = CheckInSession(EmptyApi())
    session.total = 42

    screen = render(session)

    assert screen.splitlines()[0] == "Meal Tracker - 42 meals today"
    assert "RECENT ENTRIES" not in screen


async def test_render_results_and_selection_prompt():
    session = CheckInSession(EmptyApi())
    bobby = record("Robert Hanson", "Bobby", "HC-2001")
    session.results = [record("Ana Ramirez"), bobby]
    session.select_guest(bobby)

    screen = render(session)

    assert "#1 Ana Ramirez  ID: HC-1001 | Unhoused" in screen
    assert ">#2 Bobby (Robert Hanson)  ID: HC-2001 | Unhoused" in screen
    assert "Bobby (Robert Hanson) - how many meals? [1] [2]" in screen


async def test_render_no_matches_message():
    session = CheckInSession(EmptyApi())
    session.query = "zz"

    assert 'No guests found matching "zz"' in render(session)


async def test_handle_commands():
    written = []
    session = CheckInSession(EmptyApi(), debounce_seconds=0.01)
    desk = ConsoleDesk(session, written.append)

    assert await desk.handle("ana") is True
    assert session.query == "ana"

    session.results = [record("Ana Ramirez")]
    assert await desk.handle("#3") is True
    assert written[-2] == "No result #3"
    assert session.selected is None

    await desk.handle("#1")
    assert session.state == DeskState.GUEST_SELECTED

    await desk.handle("x")
    assert session.selected is None

    assert await desk.handle("q") is False
    await session.close()


async def test_quantity_keys_without_selection_search_instead():
    session = CheckInSession(EmptyApi(), debounce_seconds=0.01)
    desk = ConsoleDesk(session, lambda text: None)

    await desk.handle("1")

    assert session.query == "1"
    assert session.recent == []
    await session.close()


@pytest.fixture
async def desk_api(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as http:
        yield CheckInApiClient(client=http)


async def test_check_in_against_running_service(desk_api, db_session):
    guests = make_directory(db_session)
    make_meal(db_session, guests[2], quantity=2)
    written = []

    async with CheckInSession(desk_api, debounce_seconds=0.01) as session:
        desk = ConsoleDesk(session, written.append)
        assert session.total == 2

        await desk.handle("anab")
        assert [g.full_name for g in session.results] == ["Anabel Ortiz"]
        assert "Bel (Anabel Ortiz)" in written[-1]

        await desk.handle("#1")
        await desk.handle("2")

        assert session.total == 4
        assert session.recent[0].guest.full_name == "Anabel Ortiz"
        assert "Bel" in written[-1] and "2 meals +" in written[-1]

        await desk.handle("t")
        assert session.total == 4


async def test_duplicate_check_in_alerts(desk_api, db_session):
    guests = make_directory(db_session)
    make_meal(db_session, guests[0])
    alerts = []

    async with CheckInSession(desk_api, debounce_seconds=0.01, on_alert=alerts.append) as session:
        session.select_guest(GuestRecord.model_validate(guests[0], from_attributes=True))
        await ConsoleDesk(session, lambda text: None).handle("1")

    assert alerts == ["Ana Ramirez has already received a meal today."]
