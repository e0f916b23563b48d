from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.pending import PendingAction, PendingBooking


class PendingActionStorePort(ABC):
    """
    At most one outstanding action (and its booking detail) per user id.

    Implementations must make every operation atomic per user id.
    """

    @abstractmethod
    def propose(
        self, user_id: str, action: PendingAction, booking: PendingBooking | None = None
    ) -> PendingAction | None:
        """Store a proposal, silently replacing any previous one. Returns the replaced action."""
        raise NotImplementedError

    @abstractmethod
    def peek(self, user_id: str) -> PendingAction | None:
        raise NotImplementedError

    @abstractmethod
    def peek_booking(self, user_id: str) -> PendingBooking | None:
        raise NotImplementedError

    @abstractmethod
    def resolve(self, user_id: str) -> None:
        """Clear both the action and the booking detail unconditionally."""
        raise NotImplementedError

    @abstractmethod
    def take(self, user_id: str) -> tuple[PendingAction, PendingBooking | None] | None:
        """
        Atomic peek-and-resolve.
        Returns None when nothing is pending; the caller owns the result.
        """
        raise NotImplementedError
