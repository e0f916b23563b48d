from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from app.application.exceptions import BookingNotFoundError, NoAvailabilityError
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.resource_directory import ResourceDirectoryPort
from app.application.use_cases.availability import AvailabilityMatcher
from app.application.utils.time_slots import normalize_time_slot
from app.domain.entities.booking import Booking
from app.domain.entities.resource import (
    RESOURCE_TYPE_NAMES,
    UNKNOWN_RESOURCE_TYPE_NAME,
    BookedSlot,
    Resource,
    ResourceType,
)
from app.infrastructure.db.models import BookingRow, ResourceRow, ResourceTypeRow


class SqlResourceDirectory(ResourceDirectoryPort):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_type_name(self, resource_type_id: int) -> str:
        if resource_type_id in RESOURCE_TYPE_NAMES:
            return RESOURCE_TYPE_NAMES[resource_type_id]
        with self._session_factory() as session:
            row = session.get(ResourceTypeRow, resource_type_id)
            return row.name if row is not None else UNKNOWN_RESOURCE_TYPE_NAME

    def list_resource_types(self) -> list[ResourceType]:
        with self._session_factory() as session:
            rows = session.scalars(select(ResourceTypeRow).order_by(ResourceTypeRow.id)).all()
            return [ResourceType(id=r.id, name=r.name) for r in rows]

    def list_bookable_resources(self, resource_type_id: int) -> list[Resource]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(ResourceRow)
                .where(ResourceRow.resource_type_id == resource_type_id, ResourceRow.is_bookable.is_(True))
                .options(selectinload(ResourceRow.bookings))
                .order_by(ResourceRow.id)
            ).all()
            return [_to_resource(r) for r in rows]


class SqlBookingStore(BookingStorePort):
    """
    SQLAlchemy booking store; one session and one commit per call.

    Allocation reads and the insert are separate transactions. The unique
    constraint on (resource_id, date, time_slot) turns a lost race into an
    IntegrityError, reported as NoAvailabilityError.
    """

    def __init__(self, session_factory: sessionmaker[Session], matcher: AvailabilityMatcher) -> None:
        self._session_factory = session_factory
        self._matcher = matcher
        self._logger = logging.getLogger(__name__)

    def get(self, booking_id: int) -> Booking | None:
        with self._session_factory() as session:
            row = session.get(BookingRow, booking_id)
            return _to_booking(row) if row is not None else None

    def list_by_user(self, user_id: str) -> list[Booking]:
        return self._list(BookingRow.user_id == user_id)

    def list_by_date(self, booking_date: date) -> list[Booking]:
        return self._list(BookingRow.date == booking_date)

    def list_by_date_for_user(self, booking_date: date, user_id: str) -> list[Booking]:
        return self._list(BookingRow.user_id == user_id, BookingRow.date == booking_date)

    def find_by_details(
        self,
        user_id: str,
        booking_date: date,
        time_slot: str,
        resource_type_id: int,
    ) -> Booking | None:
        normalized = normalize_time_slot(time_slot)
        candidates = self._list(
            BookingRow.user_id == user_id,
            BookingRow.date == booking_date,
            BookingRow.resource_type_id == resource_type_id,
        )
        # compared in Python so rows stored in either slot format match
        return next((b for b in candidates if normalize_time_slot(b.time_slot) == normalized), None)

    def create(
        self,
        booking_date: date,
        time_slot: str,
        resource_type_id: int,
        user_id: str,
    ) -> Booking:
        normalized = normalize_time_slot(time_slot)
        resource = self._matcher.first_available(resource_type_id, booking_date, normalized)

        with self._session_factory() as session:
            row = BookingRow(
                date=booking_date,
                time_slot=normalized,
                user_id=user_id,
                resource_type_id=resource_type_id,
                resource_id=resource.id,
            )
            session.add(row)
            self._commit(session, resource_type_id, booking_date, normalized)
            booking = _to_booking(row)

        self._logger.info(
            "Booking created",
            extra={"booking_id": booking.id, "user_id": user_id, "resource_id": resource.id},
        )
        return booking

    def update(
        self,
        booking_id: int,
        new_date: date,
        new_time_slot: str,
        new_resource_type_id: int,
    ) -> Booking:
        normalized = normalize_time_slot(new_time_slot)
        if self.get(booking_id) is None:
            raise BookingNotFoundError(booking_id)

        resource = self._matcher.first_available(
            new_resource_type_id, new_date, normalized, exclude_booking_id=booking_id
        )
        with self._session_factory() as session:
            row = session.get(BookingRow, booking_id)
            if row is None:
                raise BookingNotFoundError(booking_id)
            row.date = new_date
            row.time_slot = normalized
            row.resource_type_id = new_resource_type_id
            row.resource_id = resource.id
            self._commit(session, new_resource_type_id, new_date, normalized)
            booking = _to_booking(row)

        self._logger.info(
            "Booking updated",
            extra={"booking_id": booking.id, "resource_id": booking.resource_id},
        )
        return booking

    def delete(self, booking_id: int) -> bool:
        with self._session_factory() as session:
            row = session.get(BookingRow, booking_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()

        self._logger.info("Booking deleted", extra={"booking_id": booking_id})
        return True

    def _list(self, *criteria) -> list[Booking]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(BookingRow).where(*criteria).order_by(BookingRow.date, BookingRow.time_slot, BookingRow.id)
            ).all()
            return [_to_booking(r) for r in rows]

    def _commit(self, session: Session, resource_type_id: int, booking_date: date, time_slot: str) -> None:
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            self._logger.warning(
                "Slot taken concurrently",
                extra={"resource_type_id": resource_type_id, "date": booking_date.isoformat(), "time_slot": time_slot},
            )
            raise NoAvailabilityError(resource_type_id, booking_date, time_slot) from e


def _to_booking(row: BookingRow) -> Booking:
    return Booking(
        id=row.id,
        date=row.date,
        time_slot=row.time_slot,
        user_id=row.user_id,
        resource_type_id=row.resource_type_id,
        resource_id=row.resource_id,
    )


def _to_resource(row: ResourceRow) -> Resource:
    return Resource(
        id=row.id,
        resource_type_id=row.resource_type_id,
        name=row.name,
        is_bookable=bool(row.is_bookable),
        bookings=tuple(
            BookedSlot(booking_id=b.id, date=b.date, time_slot=b.time_slot or "")
            for b in row.bookings
        ),
    )
