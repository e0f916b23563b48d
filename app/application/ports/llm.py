from abc import ABC, abstractmethod

from app.domain.entities.intent import BookingIntent
from app.domain.entities.message import ChatMessage


class LLMPort(ABC):
    @abstractmethod
    def extract_intent(self, history: list[ChatMessage]) -> BookingIntent:
        """
        Turn the conversation into one structured intent.

        Requirements:
        - Returns exactly one of CreateBookingIntent, DeleteBookingIntent,
          EditBookingIntent, ShowBookingsIntent or FreeformReply
        - Dates are parsed to `date`; time slots are passed through as given
          (the dispatcher normalizes them)

        Raises:
            LLMUpstreamError: networking/provider failures
            LLMContractError: unknown tool or malformed arguments
        """
        raise NotImplementedError

    @abstractmethod
    def compose_reply(self, history: list[ChatMessage], instruction: str, fallback: str) -> str:
        """
        Word a short user-facing message, in the user's language.
        Must never raise: any failure returns `fallback`.
        """
        raise NotImplementedError
