import logging
from datetime import date

import pytest

from app.application.exceptions import BookingNotFoundError, NoAvailabilityError
from app.application.use_cases.availability import AvailabilityMatcher
from app.infrastructure.db.database import create_db_engine, create_session_factory, init_db
from app.infrastructure.db.seed import seed_resources
from app.infrastructure.store.sql_booking_store import SqlBookingStore

BOOKING_DAY = date(2025, 10, 10)
RESOURCE_COUNTS = {1: 2, 2: 1, 3: 1, 4: 1}


def test_create_stores_canonical_slot_and_first_free_resource(booking_store, matcher):
    expected = matcher.find_available(2, BOOKING_DAY, "08-10")[0]

    booking = booking_store.create(BOOKING_DAY, "08:00-10:00", 2, "alice")

    assert booking.time_slot == "08-10"
    assert booking.resource_id == expected.id
    assert booking.user_id == "alice"
    assert booking_store.get(booking.id) == booking


def test_create_raises_when_no_resource_is_free(booking_store):
    booking_store.create(BOOKING_DAY, "08-10", 2, "alice")
    with pytest.raises(NoAvailabilityError):
        booking_store.create(BOOKING_DAY, "08:00-10:00", 2, "bob")
    assert len(booking_store.list_by_date(BOOKING_DAY)) == 1


def test_unique_constraint_turns_a_lost_race_into_no_availability(session_factory, directory, booking_store):
    class StaleMatcher(AvailabilityMatcher):
        """Always answers with the first resource, as if its read happened before a competing insert."""

        def first_available(self, resource_type_id, booking_date, time_slot, exclude_booking_id=None):
            return self._directory.list_bookable_resources(resource_type_id)[0]

    racing_store = SqlBookingStore(session_factory, StaleMatcher(directory))
    racing_store.create(BOOKING_DAY, "08-10", 2, "alice")

    with pytest.raises(NoAvailabilityError):
        racing_store.create(BOOKING_DAY, "08-10", 2, "bob")

    # the store is still usable after the rollback
    assert [b.user_id for b in booking_store.list_by_date(BOOKING_DAY)] == ["alice"]


def test_find_by_details_matches_either_slot_format(booking_store):
    booking = booking_store.create(BOOKING_DAY, "10-12", 1, "alice")

    assert booking_store.find_by_details("alice", BOOKING_DAY, "10:00-12:00", 1) == booking
    assert booking_store.find_by_details("alice", BOOKING_DAY, "10-12", 2) is None
    assert booking_store.find_by_details("bob", BOOKING_DAY, "10-12", 1) is None


def test_listing_by_user_and_date(booking_store):
    a1 = booking_store.create(BOOKING_DAY, "12-14", 1, "alice")
    a2 = booking_store.create(date(2025, 10, 11), "08-10", 3, "alice")
    b1 = booking_store.create(BOOKING_DAY, "08-10", 1, "bob")

    assert [b.id for b in booking_store.list_by_user("alice")] == [a1.id, a2.id]
    assert [b.id for b in booking_store.list_by_date_for_user(BOOKING_DAY, "alice")] == [a1.id]
    assert [b.id for b in booking_store.list_by_date(BOOKING_DAY)] == [b1.id, a1.id]


def test_update_reassigns_in_place(booking_store):
    booking = booking_store.create(BOOKING_DAY, "08-10", 2, "alice")

    updated = booking_store.update(booking.id, date(2025, 10, 11), "14:00-16:00", 4)

    assert updated.id == booking.id
    assert updated.date == date(2025, 10, 11)
    assert updated.time_slot == "14-16"
    assert updated.resource_type_id == 4
    assert booking_store.get(booking.id) == updated


def test_update_to_own_slot_is_not_a_conflict(booking_store):
    booking = booking_store.create(BOOKING_DAY, "08-10", 2, "alice")
    updated = booking_store.update(booking.id, BOOKING_DAY, "08:00-10:00", 2)
    assert updated.resource_id == booking.resource_id


def test_update_errors(booking_store):
    with pytest.raises(BookingNotFoundError):
        booking_store.update(404, BOOKING_DAY, "08-10", 1)

    booking_store.create(BOOKING_DAY, "08-10", 2, "bob")
    mine = booking_store.create(BOOKING_DAY, "10-12", 2, "alice")
    with pytest.raises(NoAvailabilityError):
        booking_store.update(mine.id, BOOKING_DAY, "08-10", 2)
    assert booking_store.get(mine.id).time_slot == "10-12"


def test_delete(booking_store):
    booking = booking_store.create(BOOKING_DAY, "08-10", 1, "alice")
    assert booking_store.delete(booking.id) is True
    assert booking_store.get(booking.id) is None
    assert booking_store.delete(booking.id) is False


def test_seed_is_idempotent(session_factory, directory):
    assert seed_resources(session_factory, RESOURCE_COUNTS) == 0
    assert [t.name for t in directory.list_resource_types()] == ["desk", "meeting room", "VR headset", "AI server"]
    assert len(directory.list_bookable_resources(1)) == 2


def test_type_names(directory):
    assert directory.get_type_name(2) == "meeting room"
    assert directory.get_type_name(42) == "resource"


def test_seeding_logs_the_number_of_resources_created(caplog):
    caplog.set_level(logging.INFO)
    engine = create_db_engine("sqlite://")
    init_db(engine)

    assert seed_resources(create_session_factory(engine), 2) == 8

    record = next(r for r in caplog.records if r.getMessage() == "Seeded resources")
    assert record.resources_created == 8
    engine.dispose()
