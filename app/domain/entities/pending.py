from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class ActionKind(str, Enum):
    create = "create"
    delete = "delete"
    edit = "edit"


@dataclass(frozen=True)
class PendingBooking:
    date: date
    time_slot: str
    resource_type_id: int
    resource_type_name: str

    def to_payload(self) -> dict[str, object]:
        return {
            "date": self.date.isoformat(),
            "timeSlot": self.time_slot,
            "resourceTypeId": self.resource_type_id,
            "resourceTypeName": self.resource_type_name,
        }


@dataclass(frozen=True)
class PendingAction:
    kind: ActionKind
    booking_id: int | None = None  # required for delete/edit
    # values applied on commit (edit) or echoed back in messages (delete)
    date: date | None = None
    time_slot: str | None = None
    resource_type_id: int | None = None
    resource_type_name: str | None = None
    created_at: float = field(default_factory=time.time)

    def age_seconds(self, now_ts: float | None = None) -> float:
        now_ts = time.time() if now_ts is None else now_ts
        return max(0.0, now_ts - self.created_at)
