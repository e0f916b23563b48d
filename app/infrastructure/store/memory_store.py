from __future__ import annotations

import threading

from app.application.ports.conversation_store import ConversationStorePort
from app.application.ports.pending_action_store import PendingActionStorePort
from app.domain.entities.message import ChatMessage
from app.domain.entities.pending import PendingAction, PendingBooking


class MemoryConversationStore(ConversationStorePort):
    def __init__(self, history_limit: int = 30) -> None:
        self._threads: dict[str, list[ChatMessage]] = {}
        self._history_limit = history_limit
        self._lock = threading.Lock()

    def get_history(self, user_id: str) -> list[ChatMessage]:
        with self._lock:
            return list(self._threads.get(user_id, []))

    def append_message(self, user_id: str, role: str, text: str) -> None:
        with self._lock:
            messages = self._threads.setdefault(user_id, [])
            messages.append(ChatMessage(role=role, content=text))
            if len(messages) > self._history_limit:
                self._threads[user_id] = messages[-self._history_limit :]

    def get_recent_messages(self, user_id: str, limit: int = 10) -> list[ChatMessage]:
        """Get recent messages for context."""
        messages = self.get_history(user_id)
        return messages[-limit:] if messages else []


class MemoryPendingActionStore(PendingActionStorePort):
    """
    Single-process pending action store.

    One lock guards both maps; traffic is human-paced so contention is low.
    Nothing survives a restart.
    """

    def __init__(self) -> None:
        self._actions: dict[str, PendingAction] = {}
        self._bookings: dict[str, PendingBooking] = {}
        self._lock = threading.Lock()

    def propose(
        self, user_id: str, action: PendingAction, booking: PendingBooking | None = None
    ) -> PendingAction | None:
        with self._lock:
            previous = self._actions.get(user_id)
            self._actions[user_id] = action
            if booking is not None:
                self._bookings[user_id] = booking
            else:
                # never leave a booking from an older proposal behind
                self._bookings.pop(user_id, None)
        return previous

    def peek(self, user_id: str) -> PendingAction | None:
        with self._lock:
            return self._actions.get(user_id)

    def peek_booking(self, user_id: str) -> PendingBooking | None:
        with self._lock:
            return self._bookings.get(user_id)

    def resolve(self, user_id: str) -> None:
        with self._lock:
            self._actions.pop(user_id, None)
            self._bookings.pop(user_id, None)

    def take(self, user_id: str) -> tuple[PendingAction, PendingBooking | None] | None:
        with self._lock:
            action = self._actions.pop(user_id, None)
            booking = self._bookings.pop(user_id, None)
        if action is None:
            return None
        return action, booking
