"""
Tests for the service layer with real database operations.

- GuestService: short-query guard, search, store failure translation
- MealService: input validation, duplicate guard (including the race path
  caught by the unique index), store failure translation
- TotalsService: daily guest-meal sums
"""

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, ServiceValidationError, StoreUnavailableError
from domain.enums import MealType
from domain.models import MealAttendance
from repositories import GuestRepository, MealAttendanceRepository
from services import GuestService, MealService, TotalsService
from services.meal_service import coerce_quantity
from services.service_day import service_date
from test_fixtures import make_directory, make_guest, make_meal


def store_down(*args, **kwargs):
    raise OperationalError(
        "SELECT 1", {}, Exception("could not connect to server at db.internal:5432")
    )


# =============================================================================
# GUEST SERVICE TESTS
# =============================================================================


@pytest.mark.parametrize("query", ["", " ", "a", "  a  ", None])
def test_short_queries_never_reach_the_store(db_session: Session, monkeypatch, query):
    monkeypatch.setattr(GuestRepository, "search", store_down)

    assert GuestService.search(db_session, query) == []


def test_search_trims_query(db_session: Session):
    make_directory(db_session)

    results = GuestService.search(db_session, "  ramirez  ")

    assert [g.full_name for g in results] == ["Ana Ramirez"]


def test_search_caps_results_at_ten(db_session: Session):
    for i in range(12):
        make_guest(db_session, first_name=f"Jo{i:02d}", last_name="Garcia")

    assert len(GuestService.search(db_session, "garcia")) == 10


def test_search_store_failure_is_generic(db_session: Session, monkeypatch):
    monkeypatch.setattr(GuestRepository, "search", store_down)

    with pytest.raises(StoreUnavailableError) as exc_info:
        GuestService.search(db_session, "ana")

    assert exc_info.value.message == "Unable to search guests right now"
    assert "db.internal" not in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, OperationalError)


# =============================================================================
# MEAL SERVICE TESTS
# =============================================================================


@pytest.mark.parametrize(
    "raw, expected",
    [
        (1, 1),
        (2, 2),
        (2.0, 2),
        ("2", 2),
        (" 1 ", 1),
        ("1.0", 1),
        (1.5, None),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        ([1], None),
    ],
)
def test_coerce_quantity(raw, expected):
    assert coerce_quantity(raw) == expected


def test_record_meal_success(db_session: Session):
    guest = make_guest(db_session)

    meal = MealService.record_meal(db_session, str(guest.id), 2)

    assert meal.guest_id == guest.id
    assert meal.quantity == 2
    assert meal.meal_type == MealType.GUEST
    assert meal.served_on == service_date()
    assert db_session.query(MealAttendance).count() == 1


def test_record_meal_accepts_numeric_string_quantity(db_session: Session):
    guest = make_guest(db_session)

    meal = MealService.record_meal(db_session, str(guest.id), "1")

    assert meal.quantity == 1


@pytest.mark.parametrize("quantity", [0, 3, -1, "abc", None, 1.5, True])
def test_record_meal_rejects_bad_quantity_without_store_access(
    db_session: Session, monkeypatch, quantity
):
    guest = make_guest(db_session)
    monkeypatch.setattr(MealAttendanceRepository, "find_for_guest_on", store_down)
    monkeypatch.setattr(MealAttendanceRepository, "create_meal", store_down)

    with pytest.raises(ServiceValidationError) as exc_info:
        MealService.record_meal(db_session, str(guest.id), quantity)

    assert exc_info.value.message == "Invalid guest ID or quantity"


@pytest.mark.parametrize("guest_id", [None, "", "   ", "not-a-uuid", 42])
def test_record_meal_rejects_bad_guest_id(db_session: Session, guest_id):
    with pytest.raises(ServiceValidationError):
        MealService.record_meal(db_session, guest_id, 1)

    assert db_session.query(MealAttendance).count() == 0


def test_second_meal_same_day_is_a_conflict(db_session: Session):
    guest = make_guest(db_session)
    MealService.record_meal(db_session, str(guest.id), 1)

    with pytest.raises(ConflictError) as exc_info:
        MealService.record_meal(db_session, str(guest.id), 2)

    assert exc_info.value.message == "Guest already received a meal today"
    assert exc_info.value.http_status == 409
    assert db_session.query(MealAttendance).count() == 1


def test_meal_yesterday_does_not_block_today(db_session: Session):
    guest = make_guest(db_session)
    make_meal(db_session, guest, served_on=service_date() - timedelta(days=1))

    MealService.record_meal(db_session, str(guest.id), 1)

    assert db_session.query(MealAttendance).count() == 2


def test_other_categories_do_not_block_guest_meal(db_session: Session):
    guest = make_guest(db_session)
    make_meal(db_session, guest, meal_type=MealType.LUNCH_BAG)

    meal = MealService.record_meal(db_session, str(guest.id), 1)

    assert meal.meal_type == MealType.GUEST


def test_concurrent_duplicate_caught_by_unique_index(db_session: Session, monkeypatch):
    """
    Two desks pass the existence check at the same time.

    Simulated by hiding the existing record from the first check only: the
    insert then trips the unique index and the outcome is still a conflict.
    """
    guest = make_guest(db_session)
    make_meal(db_session, guest, quantity=1)

    real_find = MealAttendanceRepository.find_for_guest_on
    calls = {"n": 0}

    def find_misses_first_time(self, *args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_find(self, *args, **kwargs)

    monkeypatch.setattr(MealAttendanceRepository, "find_for_guest_on", find_misses_first_time)

    with pytest.raises(ConflictError):
        MealService.record_meal(db_session, str(guest.id), 2)

    assert calls["n"] == 2
    assert db_session.query(MealAttendance).count() == 1


def test_existence_check_failure_is_generic(db_session: Session, monkeypatch):
    guest = make_guest(db_session)
    monkeypatch.setattr(MealAttendanceRepository, "find_for_guest_on", store_down)

    with pytest.raises(StoreUnavailableError) as exc_info:
        MealService.record_meal(db_session, str(guest.id), 1)

    assert exc_info.value.message == "Unable to validate meal history"


def test_insert_failure_is_generic(db_session: Session, monkeypatch):
    guest = make_guest(db_session)
    monkeypatch.setattr(MealAttendanceRepository, "create_meal", store_down)

    with pytest.raises(StoreUnavailableError) as exc_info:
        MealService.record_meal(db_session, str(guest.id), 1)

    assert exc_info.value.message == "Unable to record meal"
    assert "db.internal" not in exc_info.value.message


# =============================================================================
# TOTALS SERVICE TESTS
# =============================================================================


def test_today_total_is_zero_without_meals(db_session: Session):
    assert TotalsService.today_total(db_session) == 0


def test_today_total_sums_guest_meals_for_today_only(db_session: Session):
    ana, bel, marcus, *_ = make_directory(db_session)
    make_meal(db_session, ana, quantity=1)
    make_meal(db_session, bel, quantity=2)
    make_meal(db_session, marcus, quantity=2, served_on=service_date() - timedelta(days=1))
    make_meal(db_session, None, quantity=7, meal_type=MealType.EXTRA)

    assert TotalsService.today_total(db_session) == 3


def test_today_total_treats_missing_quantity_as_zero(db_session: Session, monkeypatch):
    monkeypatch.setattr(
        MealAttendanceRepository, "get_quantities_on", lambda self, *a, **k: [2, None, 1]
    )

    assert TotalsService.today_total(db_session) == 3


def test_two_guests_with_two_meals_each_total_four(db_session: Session):
    a = make_guest(db_session, first_name="Ana")
    b = make_guest(db_session, first_name="Marcus", last_name="Bell")

    MealService.record_meal(db_session, str(a.id), 2)
    MealService.record_meal(db_session, str(b.id), 2)

    assert TotalsService.today_total(db_session) == 4


def test_today_total_store_failure_is_generic(db_session: Session, monkeypatch):
    monkeypatch.setattr(MealAttendanceRepository, "get_quantities_on", store_down)

    with pytest.raises(StoreUnavailableError) as exc_info:
        TotalsService.today_total(db_session)

    assert exc_info.value.message == "Unable to load totals"


def test_record_meal_uses_configured_timezone(db_session: Session):
    guest = make_guest(db_session)

    meal = MealService.record_meal(db_session, str(guest.id), 1, tz_name="Pacific/Kiritimati")

    assert meal.served_on == service_date(tz_name="Pacific/Kiritimati")
