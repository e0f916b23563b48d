from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Union


@dataclass(frozen=True)
class CreateBookingIntent:
    date: date
    time_slot: str
    resource_type_id: int


@dataclass(frozen=True)
class DeleteBookingIntent:
    date: date
    time_slot: str
    resource_type_id: int


@dataclass(frozen=True)
class EditBookingIntent:
    current_date: date
    current_time_slot: str
    current_resource_type_id: int
    new_date: date
    new_time_slot: str
    new_resource_type_id: int


@dataclass(frozen=True)
class ShowBookingsIntent:
    date: date | None = None


@dataclass(frozen=True)
class FreeformReply:
    text: str


BookingIntent = Union[
    CreateBookingIntent,
    DeleteBookingIntent,
    EditBookingIntent,
    ShowBookingsIntent,
    FreeformReply,
]
