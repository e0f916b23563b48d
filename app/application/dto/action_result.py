from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.domain.entities.pending import ActionKind, PendingBooking


@dataclass(frozen=True)
class ActionResponse:
    """Result of a propose/show/free-text turn."""

    answer: str
    pending_booking: PendingBooking | None = None
    awaiting_confirmation: bool = False
    action_type: ActionKind | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "answer": self.answer,
            "pendingBooking": self.pending_booking.to_payload() if self.pending_booking else None,
            "awaitingConfirmation": self.awaiting_confirmation,
            "actionType": self.action_type.value if self.action_type else None,
        }


class ConfirmOutcome(str, Enum):
    committed = "committed"
    cancelled = "cancelled"
    unavailable = "unavailable"
    not_found = "not_found"
    no_pending_action = "no_pending_action"
    failed = "failed"


@dataclass(frozen=True)
class ConfirmResult:
    """Result of resolving a pending action with confirm/cancel."""

    outcome: ConfirmOutcome
    message: str | None = None
    booking_id: int | None = None
    error: str | None = None
    details: str | None = None

    @property
    def is_error(self) -> bool:
        return self.outcome in (ConfirmOutcome.no_pending_action, ConfirmOutcome.failed)

    def to_payload(self) -> dict[str, Any]:
        if self.is_error:
            payload: dict[str, Any] = {"error": self.error or self.message or ""}
            if self.details is not None:
                payload["details"] = self.details
            return payload
        payload = {"message": self.message or ""}
        if self.booking_id is not None:
            payload["bookingId"] = self.booking_id
        return payload
