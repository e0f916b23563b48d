from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from app.domain.entities.booking import Booking


class BookingStorePort(ABC):
    """
    Persistence contract for bookings. Each call is its own unit of work.

    `create` and `update` allocate a concrete resource through the
    availability matcher and raise NoAvailabilityError when none is free.
    """

    @abstractmethod
    def get(self, booking_id: int) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def list_by_date(self, booking_date: date) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def list_by_date_for_user(self, booking_date: date, user_id: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_by_details(
        self,
        user_id: str,
        booking_date: date,
        time_slot: str,
        resource_type_id: int,
    ) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def create(
        self,
        booking_date: date,
        time_slot: str,
        resource_type_id: int,
        user_id: str,
    ) -> Booking:
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        booking_id: int,
        new_date: date,
        new_time_slot: str,
        new_resource_type_id: int,
    ) -> Booking:
        """Raises BookingNotFoundError if the booking is gone."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, booking_id: int) -> bool:
        """Returns False if there was nothing to delete."""
        raise NotImplementedError
