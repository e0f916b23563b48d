from __future__ import annotations

import logging
from datetime import date

from app.application.exceptions import NoAvailabilityError
from app.application.ports.resource_directory import ResourceDirectoryPort
from app.application.utils.time_slots import normalize_time_slot
from app.domain.entities.resource import Resource


class AvailabilityMatcher:
    def __init__(self, directory: ResourceDirectoryPort) -> None:
        self._directory = directory
        self._logger = logging.getLogger(__name__)

    def find_available(
        self,
        resource_type_id: int,
        booking_date: date,
        time_slot: str,
        exclude_booking_id: int | None = None,
    ) -> list[Resource]:
        """
        Bookable resources of the type with no booking on (date, slot).

        Stored slots are normalized too, so legacy rows written as
        "08:00-10:00" still conflict with a request for "08-10".
        """
        normalized = normalize_time_slot(time_slot)
        resources = self._directory.list_bookable_resources(resource_type_id)

        available: list[Resource] = []
        for resource in resources:
            if not resource.is_bookable:
                continue
            conflict = any(
                b.date == booking_date
                and normalize_time_slot(b.time_slot) == normalized
                and b.booking_id != exclude_booking_id
                for b in resource.bookings
            )
            if not conflict:
                available.append(resource)

        self._logger.debug(
            "Availability checked",
            extra={
                "resource_type_id": resource_type_id,
                "date": booking_date.isoformat(),
                "time_slot": normalized,
                "available": len(available),
            },
        )
        return available

    def first_available(
        self,
        resource_type_id: int,
        booking_date: date,
        time_slot: str,
        exclude_booking_id: int | None = None,
    ) -> Resource:
        available = self.find_available(resource_type_id, booking_date, time_slot, exclude_booking_id)
        if not available:
            raise NoAvailabilityError(resource_type_id, booking_date, normalize_time_slot(time_slot))
        return available[0]
