from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ResourceType:
    id: int
    name: str


@dataclass(frozen=True)
class BookedSlot:
    booking_id: int
    date: date
    time_slot: str


@dataclass(frozen=True)
class Resource:
    id: int
    resource_type_id: int
    name: str
    is_bookable: bool = True
    bookings: tuple[BookedSlot, ...] = ()


RESOURCE_TYPE_NAMES: dict[int, str] = {
    1: "desk",
    2: "meeting room",
    3: "VR headset",
    4: "AI server",
}

UNKNOWN_RESOURCE_TYPE_NAME = "resource"
