from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from openai import OpenAI

from app.application.exceptions import LLMContractError, LLMUpstreamError
from app.application.ports.llm import LLMPort
from app.application.utils.time_slots import parse_booking_date
from app.core.config import settings
from app.domain.entities.intent import (
    BookingIntent,
    CreateBookingIntent,
    DeleteBookingIntent,
    EditBookingIntent,
    FreeformReply,
    ShowBookingsIntent,
)
from app.domain.entities.message import ChatMessage
from app.infrastructure.llm.prompts import build_booking_tools, build_intent_system_prompt

DEFAULT_REPLY = "Sorry, I didn't understand that."


class OpenAILLM(LLMPort):
    """
    OpenAI-backed adapter implementing LLMPort.

    Contract guarantees:
    - extract_intent returns exactly one BookingIntent variant
    - compose_reply never raises, it falls back to the given text
    - Raises (extract_intent only):
        LLMUpstreamError: networking/provider failures
        LLMContractError: unknown function or malformed arguments
    """

    def __init__(self, client: OpenAI | None = None) -> None:
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)
        self._logger = logging.getLogger(__name__)

    def extract_intent(self, history: list[ChatMessage]) -> BookingIntent:
        now = datetime.now()
        messages = [{"role": "system", "content": build_intent_system_prompt(settings.HUB_NAME, now)}]
        messages += _to_messages(history)

        try:
            resp = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL_INTENT,
                messages=messages,
                tools=build_booking_tools(now),
                tool_choice="auto",
                temperature=settings.OPENAI_TEMPERATURE_INTENT,
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        if not resp.choices:
            raise LLMContractError("LLM returned no choices.")
        message = resp.choices[0].message

        tool_calls = getattr(message, "tool_calls", None) or []
        if tool_calls:
            call = tool_calls[0]
            return parse_tool_call(call.function.name, call.function.arguments)

        text = (message.content or "").strip()
        return FreeformReply(text=text or DEFAULT_REPLY)

    def compose_reply(self, history: list[ChatMessage], instruction: str, fallback: str) -> str:
        messages = _to_messages(history) + [{"role": "user", "content": instruction}]
        try:
            resp = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL_REPLY,
                messages=messages,
                temperature=settings.OPENAI_TEMPERATURE_REPLY,
                max_tokens=400,
            )
            content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        except Exception as e:
            self._logger.warning("Reply generation failed, using fallback", extra={"error": str(e)})
            return fallback
        return content or fallback


def parse_tool_call(name: str, arguments: str | None) -> BookingIntent:
    args = _parse_arguments(arguments, name)

    if name == "create_booking":
        return CreateBookingIntent(
            date=_date(args, "date", name),
            time_slot=_str(args, "timeSlot", name),
            resource_type_id=_int(args, "resourceTypeId", name),
        )
    if name == "delete_booking":
        return DeleteBookingIntent(
            date=_date(args, "date", name),
            time_slot=_str(args, "timeSlot", name),
            resource_type_id=_int(args, "resourceTypeId", name),
        )
    if name == "edit_booking":
        return EditBookingIntent(
            current_date=_date(args, "currentDate", name),
            current_time_slot=_str(args, "currentTimeSlot", name),
            current_resource_type_id=_int(args, "currentResourceTypeId", name),
            new_date=_date(args, "newDate", name),
            new_time_slot=_str(args, "newTimeSlot", name),
            new_resource_type_id=_int(args, "newResourceTypeId", name),
        )
    if name == "show_bookings":
        raw_date = args.get("date")
        if not raw_date:
            return ShowBookingsIntent()
        try:
            return ShowBookingsIntent(date=parse_booking_date(raw_date))
        except ValueError:
            # an unparseable filter means "show everything"
            return ShowBookingsIntent()

    raise LLMContractError(f"Unknown function call: {name!r}")


def _to_messages(history: list[ChatMessage]) -> list[dict[str, str]]:
    return [{"role": m.role, "content": m.content} for m in history if m.content]


def _parse_arguments(arguments: str | None, what: str) -> dict[str, Any]:
    if not arguments:
        return {}
    try:
        data = json.loads(arguments)
    except Exception:
        snippet = arguments[:200].replace("\n", " ")
        raise LLMContractError(f"{what}: invalid JSON arguments. Snippet: {snippet!r}")
    if not isinstance(data, dict):
        raise LLMContractError(f"{what}: arguments must be a JSON object.")
    # "Date" and "date" are both accepted
    return {str(k)[:1].lower() + str(k)[1:]: v for k, v in data.items()}


def _str(args: dict[str, Any], key: str, what: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value.strip():
        raise LLMContractError(f"{what}: '{key}' must be a non-empty string.")
    return value.strip()


def _int(args: dict[str, Any], key: str, what: str) -> int:
    value = args.get(key)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise LLMContractError(f"{what}: '{key}' must be an integer.")


def _date(args: dict[str, Any], key: str, what: str):
    try:
        return parse_booking_date(args.get(key))
    except ValueError as e:
        raise LLMContractError(f"{what}: {e}")
