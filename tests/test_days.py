"""Tests for day-entry validation, ownership and derived hours."""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from sqlalchemy import func, select

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from daytracker.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from daytracker.crud.users import create_user
from daytracker.db.session import Base, build_engine, build_session_factory
from daytracker.models.day import DayEntry
from daytracker.schemas.day import DayInput
from daytracker.services.days import DayEntryService

# Ensure models are registered so metadata tables are created
from daytracker.models import user as user_model  # noqa: F401


@pytest.fixture()
def db_session():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def alice(db_session):
    return create_user(db_session, "alice@x.com", "hash")


@pytest.fixture()
def bob(db_session):
    return create_user(db_session, "bob@x.com", "hash")


@pytest.fixture()
def service(db_session):
    return DayEntryService(db_session, tz="UTC")


def _day(date="2024-01-01", start="09:00", end=None, location=None):
    return DayInput(date=date, time_start=start, time_end=end, location=location)


def _row_count(db_session):
    return db_session.execute(select(func.count()).select_from(DayEntry)).scalar_one()


def test_create_derives_hours_from_clock_times(service, alice):
    entry = service.create(alice.id, _day(start="09:00", end="17:30", location=" Office "))

    assert entry.hours == 8.5
    assert entry.user_id == alice.id
    assert entry.location == "Office"
    assert entry.open is False


def test_create_open_entry_has_zero_hours(service, alice):
    entry = service.create(alice.id, _day(end=""))

    assert entry.time_end is None
    assert entry.hours == 0
    assert entry.open is True


def test_reversed_range_is_rejected_and_nothing_is_stored(service, db_session, alice):
    with pytest.raises(ValidationError):
        service.create(alice.id, _day(start="17:00", end="09:00"))
    assert _row_count(db_session) == 0


@pytest.mark.parametrize(
    "payload",
    [
        _day(date="01/01/2024"),
        _day(date="2024-13-01"),
        _day(start="9am"),
        _day(end="25:00"),
        _day(location="Office \ud800"),
    ],
)
def test_malformed_input_is_a_validation_error(service, db_session, alice, payload):
    with pytest.raises(ValidationError):
        service.create(alice.id, payload)
    assert _row_count(db_session) == 0


def test_update_with_unencodable_location_keeps_the_stored_row(service, alice):
    entry = service.create(alice.id, _day(start="09:00", end="10:00", location="Office"))

    with pytest.raises(ValidationError, match="location"):
        service.update(alice.id, entry.id, _day(start="09:00", end="12:00", location="\udcff"))

    kept = service.get(alice.id, entry.id)
    assert kept.location == "Office"
    assert kept.hours == 1


def test_duplicate_start_is_a_conflict_and_keeps_the_first(service, db_session, alice):
    first = service.create(alice.id, _day(start="09:00", end="10:00", location="Office"))

    with pytest.raises(ConflictError):
        service.create(alice.id, _day(start="09:00", end="12:00", location="Home"))

    kept = service.get(alice.id, first.id)
    assert kept.hours == 1
    assert kept.location == "Office"
    assert _row_count(db_session) == 1


def test_unpadded_start_collides_with_padded_start(service, alice):
    service.create(alice.id, _day(start="09:00"))
    with pytest.raises(ConflictError):
        service.create(alice.id, _day(start="9:00"))


def test_same_start_for_different_users_is_fine(service, alice, bob):
    service.create(alice.id, _day())
    service.create(bob.id, _day())


def test_update_replaces_every_field(service, alice):
    entry = service.create(alice.id, _day(start="09:00", end="10:00", location="Office"))

    updated = service.update(alice.id, entry.id, _day(date="2024-01-02", start="08:00", end="08:45"))

    assert updated.date == "2024-01-02"
    assert updated.time_start == "08:00"
    assert updated.hours == 0.75
    assert updated.location is None


def test_update_into_existing_start_is_a_conflict(service, alice):
    service.create(alice.id, _day(start="09:00"))
    other = service.create(alice.id, _day(start="13:00"))

    with pytest.raises(ConflictError):
        service.update(alice.id, other.id, _day(start="09:00"))
    assert service.get(alice.id, other.id).time_start == "13:00"


def test_other_users_entries_are_invisible(service, alice, bob):
    entry = service.create(alice.id, _day(end="10:00"))

    assert service.get(bob.id, entry.id) is None
    with pytest.raises(NotFoundError):
        service.update(bob.id, entry.id, _day(end="11:00"))
    with pytest.raises(NotFoundError):
        service.delete(bob.id, entry.id)
    with pytest.raises(NotFoundError):
        service.close(bob.id, entry.id)

    assert service.get(alice.id, entry.id).hours == 1


def test_missing_and_foreign_ids_look_the_same(service, alice, bob):
    entry = service.create(alice.id, _day())

    with pytest.raises(NotFoundError) as foreign:
        service.delete(bob.id, entry.id)
    with pytest.raises(NotFoundError) as missing:
        service.delete(bob.id, 9999)
    assert foreign.value.message == missing.value.message


def test_delete_removes_the_entry(service, alice):
    entry = service.create(alice.id, _day())
    service.delete(alice.id, entry.id)

    assert service.get(alice.id, entry.id) is None
    with pytest.raises(NotFoundError):
        service.delete(alice.id, entry.id)


def test_anonymous_callers_fail_closed(service):
    with pytest.raises(UnauthorizedError):
        service.create(None, _day())
    with pytest.raises(UnauthorizedError):
        service.list(None)
    with pytest.raises(UnauthorizedError):
        service.get(None, 1)


def test_list_orders_most_recent_first_and_filters_by_range(service, alice, bob):
    service.create(alice.id, _day(date="2024-01-01", start="09:00"))
    service.create(alice.id, _day(date="2024-01-02", start="08:00"))
    service.create(alice.id, _day(date="2024-01-02", start="13:00"))
    service.create(alice.id, _day(date="2024-01-05", start="10:00"))
    service.create(bob.id, _day(date="2024-01-02", start="07:00"))

    everything = service.list(alice.id)
    assert [(e.date, e.time_start) for e in everything] == [
        ("2024-01-05", "10:00"),
        ("2024-01-02", "13:00"),
        ("2024-01-02", "08:00"),
        ("2024-01-01", "09:00"),
    ]

    bounded = service.list(alice.id, "2024-01-02", "2024-01-02")
    assert [e.time_start for e in bounded] == ["13:00", "08:00"]


def test_list_ignores_malformed_bounds(service, alice):
    service.create(alice.id, _day(date="2024-01-01"))
    assert len(service.list(alice.id, "last week", "2024/12/31")) == 1


def test_close_stamps_given_end_time(service, alice):
    entry = service.create(alice.id, _day(start="09:00", location="Office"))

    closed = service.close(alice.id, entry.id, "12:30")

    assert closed.time_end == "12:30"
    assert closed.hours == 3.5
    assert closed.location == "Office"


def test_close_defaults_to_wall_clock(db_session, alice):
    clock = lambda: datetime(2024, 1, 1, 17, 45, tzinfo=timezone.utc)  # noqa: E731
    service = DayEntryService(db_session, tz="UTC", clock=clock)
    entry = service.create(alice.id, _day(start="09:00"))

    closed = service.close(alice.id, entry.id)

    assert closed.time_end == "17:45"
    assert closed.hours == 8.75


def test_close_is_a_no_op_for_closed_entries(service, alice):
    entry = service.create(alice.id, _day(start="09:00", end="10:00"))

    closed = service.close(alice.id, entry.id, "18:00")

    assert closed.time_end == "10:00"
    assert closed.hours == 1


def test_close_rejects_end_before_start(service, alice):
    entry = service.create(alice.id, _day(start="09:00"))

    with pytest.raises(ValidationError):
        service.close(alice.id, entry.id, "08:00")
    assert service.get(alice.id, entry.id).open is True
