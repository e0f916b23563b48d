from __future__ import annotations

import re
from datetime import date, timedelta

from app.application.ports.llm import LLMPort
from app.domain.entities.intent import (
    BookingIntent,
    CreateBookingIntent,
    DeleteBookingIntent,
    EditBookingIntent,
    FreeformReply,
    ShowBookingsIntent,
)
from app.domain.entities.message import ChatMessage

_DATE_RE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")
_SLOT_RE = re.compile(r"\b(\d{1,2})(?::00)?\s*-\s*(\d{1,2})(?::00)?\b")

_TYPE_KEYWORDS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (3, ("vr", "headset")),
    (4, ("server", "gpu")),
    (2, ("meeting", "room")),
    (1, ("desk",)),
)

HELP_TEXT = (
    "I can book, change, cancel or list desks, meeting rooms, VR headsets and AI servers. "
    "Tell me the date (YYYY-MM-DD), the time slot (e.g. 08:00-10:00) and what you need."
)


class MockLLM(LLMPort):
    """Keyword-based stand-in used when no OpenAI key is configured."""

    def __init__(self, today: date | None = None) -> None:
        self._today = today

    def extract_intent(self, history: list[ChatMessage]) -> BookingIntent:
        text = next((m.content for m in reversed(history) if m.role == "user"), "")
        normalized = text.lower()

        dates = self._dates(normalized)
        without_dates = _DATE_RE.sub(" ", normalized)
        slots = [f"{int(a):02d}-{int(b):02d}" for a, b in _SLOT_RE.findall(without_dates)]
        types = _resource_types(normalized)

        if _mentions(normalized, ("show", "list", "my bookings", "what have i booked")):
            return ShowBookingsIntent(date=dates[0] if dates else None)

        if _mentions(normalized, ("change", "move", "edit", "reschedule")):
            if not dates or not slots or not types:
                return FreeformReply(text="Which booking should I change, and to what date and time slot?")
            return EditBookingIntent(
                current_date=dates[0],
                current_time_slot=slots[0],
                current_resource_type_id=types[0],
                new_date=dates[-1],
                new_time_slot=slots[-1],
                new_resource_type_id=types[-1],
            )

        if _mentions(normalized, ("delete", "cancel", "remove")):
            if not dates or not slots or not types:
                return FreeformReply(text="Which booking should I cancel? Please give the date, time slot and resource.")
            return DeleteBookingIntent(date=dates[0], time_slot=slots[0], resource_type_id=types[0])

        if _mentions(normalized, ("book", "reserve")):
            if not dates or not slots or not types:
                return FreeformReply(text=HELP_TEXT)
            return CreateBookingIntent(date=dates[0], time_slot=slots[0], resource_type_id=types[0])

        return FreeformReply(text=HELP_TEXT)

    def compose_reply(self, history: list[ChatMessage], instruction: str, fallback: str) -> str:
        return fallback

    def _dates(self, text: str) -> list[date]:
        today = self._today or date.today()
        found: list[date] = []
        for raw in _DATE_RE.findall(text):
            try:
                found.append(date.fromisoformat(raw))
            except ValueError:
                continue
        if "tomorrow" in text:
            found.append(today + timedelta(days=1))
        elif "today" in text:
            found.append(today)
        return found


def _resource_types(text: str) -> list[int]:
    """Resource types in the order they are mentioned."""
    hits: list[tuple[int, int]] = []
    for type_id, keywords in _TYPE_KEYWORDS:
        positions = [m.start() for kw in keywords for m in re.finditer(rf"\b{kw}", text)]
        for pos in positions:
            hits.append((pos, type_id))
    hits.sort()
    return [type_id for _, type_id in hits]


def _mentions(text: str, phrases: tuple[str, ...]) -> bool:
    return any(re.search(rf"\b{re.escape(p)}\b", text) for p in phrases)
