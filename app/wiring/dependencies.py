from __future__ import annotations

from functools import lru_cache
import logging

from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.conversation_store import ConversationStorePort
from app.application.ports.llm import LLMPort
from app.application.ports.pending_action_store import PendingActionStorePort
from app.application.ports.resource_directory import ResourceDirectoryPort
from app.application.use_cases.availability import AvailabilityMatcher
from app.application.use_cases.booking_actions import BookingActionDispatcher
from app.application.use_cases.handle_chat import HandleChatUseCase
from app.infrastructure.db.database import create_db_engine, create_session_factory, init_db
from app.infrastructure.db.seed import seed_resources
from app.infrastructure.llm.mock_llm import MockLLM
from app.infrastructure.llm.openai_llm import OpenAILLM
from app.infrastructure.store.memory_store import MemoryConversationStore, MemoryPendingActionStore
from app.infrastructure.store.sql_booking_store import SqlBookingStore, SqlResourceDirectory


logger = logging.getLogger(__name__)


@lru_cache
def get_llm() -> LLMPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAILLM()
    logger.info("Using MockLLM (OPENAI_API_KEY missing)")
    return MockLLM()


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    init_db(engine)
    factory = create_session_factory(engine)
    if settings.SEED_RESOURCES:
        seed_resources(factory, settings.RESOURCES_PER_TYPE)
    return factory


@lru_cache
def get_conversation_store() -> ConversationStorePort:
    return MemoryConversationStore(history_limit=settings.CONVERSATION_HISTORY_LIMIT)


@lru_cache
def get_pending_action_store() -> PendingActionStorePort:
    return MemoryPendingActionStore()


def get_resource_directory() -> ResourceDirectoryPort:
    return SqlResourceDirectory(get_session_factory())


def get_availability_matcher() -> AvailabilityMatcher:
    return AvailabilityMatcher(get_resource_directory())


def get_booking_store() -> BookingStorePort:
    return SqlBookingStore(get_session_factory(), get_availability_matcher())


def get_dispatcher() -> BookingActionDispatcher:
    return BookingActionDispatcher(
        booking_store=get_booking_store(),
        directory=get_resource_directory(),
        pending_store=get_pending_action_store(),
        llm=get_llm(),
        hub_name=settings.HUB_NAME,
        pending_ttl_seconds=settings.PENDING_ACTION_TTL_SECONDS,
    )


def get_handle_chat_use_case() -> HandleChatUseCase:
    return HandleChatUseCase(
        store=get_conversation_store(),
        llm=get_llm(),
        dispatcher=get_dispatcher(),
    )


def get_container() -> dict[str, object]:
    return {
        "use_case": get_handle_chat_use_case(),
        "store": get_conversation_store(),
        "bookings": get_booking_store(),
    }
