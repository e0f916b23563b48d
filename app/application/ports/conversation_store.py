from abc import ABC, abstractmethod

from app.domain.entities.message import ChatMessage


class ConversationStorePort(ABC):
    @abstractmethod
    def get_history(self, user_id: str) -> list[ChatMessage]:
        """Snapshot of the user's messages, oldest first. Mutating it does not write back."""
        raise NotImplementedError

    @abstractmethod
    def append_message(self, user_id: str, role: str, text: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_recent_messages(self, user_id: str, limit: int = 10) -> list[ChatMessage]:
        raise NotImplementedError
