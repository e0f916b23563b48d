from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Booking:
    id: int
    date: date
    time_slot: str  # canonical "HH-HH"
    user_id: str
    resource_type_id: int
    resource_id: int
