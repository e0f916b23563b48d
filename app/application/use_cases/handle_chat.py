from __future__ import annotations

import logging

from app.application.dto.action_result import ActionResponse, ConfirmResult
from app.application.ports.conversation_store import ConversationStorePort
from app.application.ports.llm import LLMPort
from app.application.use_cases.booking_actions import BookingActionDispatcher
from app.domain.entities.intent import FreeformReply
from app.domain.entities.message import ChatMessage


class HandleChatUseCase:
    def __init__(
        self,
        store: ConversationStorePort,
        llm: LLMPort,
        dispatcher: BookingActionDispatcher,
    ) -> None:
        self._store = store
        self._llm = llm
        self._dispatcher = dispatcher
        self._logger = logging.getLogger(__name__)

    def handle(self, user_id: str, text: str) -> ActionResponse:
        """
        Run one chat turn: record the question, extract the intent, dispatch.

        LLM errors from intent extraction propagate to the caller.
        """
        self._store.append_message(user_id, role="user", text=text)
        history = self._store.get_history(user_id)
        seen = len(history)

        intent = self._llm.extract_intent(history)
        self._logger.info(
            "Intent extracted",
            extra={"user_id": user_id, "intent": type(intent).__name__},
        )

        if isinstance(intent, FreeformReply) and not intent.text.strip():
            intent = FreeformReply(text="Sorry, I didn't understand that.")

        try:
            return self._dispatcher.handle_intent(user_id, intent, history)
        finally:
            self._persist_new_messages(user_id, history, seen)

    def confirm(self, user_id: str, confirm: bool) -> ConfirmResult:
        history = self._store.get_history(user_id)
        seen = len(history)
        try:
            return self._dispatcher.confirm_action(user_id, confirm, history)
        finally:
            self._persist_new_messages(user_id, history, seen)

    def _persist_new_messages(self, user_id: str, history: list[ChatMessage], seen: int) -> None:
        for message in history[seen:]:
            self._store.append_message(user_id, role=message.role, text=message.content)
