from __future__ import annotations

from datetime import date

import pytest

from app.application.use_cases.availability import AvailabilityMatcher
from app.application.use_cases.booking_actions import BookingActionDispatcher
from app.infrastructure.db.database import create_db_engine, create_session_factory, init_db
from app.infrastructure.db.seed import seed_resources
from app.infrastructure.llm.mock_llm import MockLLM
from app.infrastructure.store.memory_store import MemoryConversationStore, MemoryPendingActionStore
from app.infrastructure.store.sql_booking_store import SqlBookingStore, SqlResourceDirectory

BOOKING_DAY = date(2025, 10, 10)

# two desks, one meeting room, one VR headset, one AI server
RESOURCE_COUNTS = {1: 2, 2: 1, 3: 1, 4: 1}


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    factory = create_session_factory(engine)
    seed_resources(factory, RESOURCE_COUNTS)
    yield factory
    engine.dispose()


@pytest.fixture
def directory(session_factory):
    return SqlResourceDirectory(session_factory)


@pytest.fixture
def matcher(directory):
    return AvailabilityMatcher(directory)


@pytest.fixture
def booking_store(session_factory, matcher):
    return SqlBookingStore(session_factory, matcher)


@pytest.fixture
def pending_store():
    return MemoryPendingActionStore()


@pytest.fixture
def conversation_store():
    return MemoryConversationStore()


@pytest.fixture
def llm():
    return MockLLM(today=BOOKING_DAY)


@pytest.fixture
def dispatcher(booking_store, directory, pending_store, llm):
    return BookingActionDispatcher(
        booking_store=booking_store,
        directory=directory,
        pending_store=pending_store,
        llm=llm,
    )
