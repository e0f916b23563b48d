from __future__ import annotations

from datetime import date, datetime

TIME_SLOTS: tuple[str, ...] = ("08-10", "10-12", "12-14", "14-16", "16-18", "18-20")

TIME_SLOT_CHOICES: tuple[str, ...] = tuple(
    f"{slot[:2]}:00-{slot[3:]}:00" for slot in TIME_SLOTS
)


def normalize_time_slot(value: str) -> str:
    """
    Canonicalize a time slot so "08:00-10:00" and "08-10" compare equal.

    Anything that is not a two-part hyphenated band is returned trimmed and
    otherwise unchanged.
    """
    if value is None:
        return ""
    parts = value.split("-")
    if len(parts) != 2:
        return value.strip()
    left, right = (_normalize_boundary(p) for p in parts)
    return f"{left}-{right}"


def _normalize_boundary(part: str) -> str:
    return part.strip().replace(":00", "").replace(":", "")


def display_time_slot(value: str) -> str:
    """Render a canonical "08-10" band as "08:00-10:00" for messages."""
    normalized = normalize_time_slot(value)
    if normalized in TIME_SLOTS:
        left, right = normalized.split("-")
        return f"{left}:00-{right}:00"
    return normalized


def is_known_time_slot(value: str) -> bool:
    return normalize_time_slot(value) in TIME_SLOTS


def parse_booking_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid booking date: {value!r}")
    text = value.strip()
    # tolerate "2025-10-10T00:00:00" and "2025-10-10 00:00"
    text = text.split("T", 1)[0].split(" ", 1)[0]
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid booking date: {value!r}") from e
