from __future__ import annotations

import logging
import time
from typing import Callable

from app.application.dto.action_result import ActionResponse, ConfirmOutcome, ConfirmResult
from app.application.exceptions import BookingNotFoundError, NoAvailabilityError
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.llm import LLMPort
from app.application.ports.pending_action_store import PendingActionStorePort
from app.application.ports.resource_directory import ResourceDirectoryPort
from app.application.utils.time_slots import (
    TIME_SLOTS,
    display_time_slot,
    is_known_time_slot,
    normalize_time_slot,
)
from app.domain.entities.booking import Booking
from app.domain.entities.intent import (
    BookingIntent,
    CreateBookingIntent,
    DeleteBookingIntent,
    EditBookingIntent,
    FreeformReply,
    ShowBookingsIntent,
)
from app.domain.entities.message import ChatMessage
from app.domain.entities.pending import ActionKind, PendingAction, PendingBooking


NO_PENDING_ACTION = "No pending action found."


class BookingActionDispatcher:
    """
    Routes structured intents to handlers and resolves confirmations.

    Per user the flow is Idle -> Proposed -> (Committed | Aborted | Failed)
    -> Idle. A proposal only records what to do; resources are allocated
    when the user confirms, so two users may propose the same slot and the
    second commit ends as `unavailable`.
    """

    def __init__(
        self,
        booking_store: BookingStorePort,
        directory: ResourceDirectoryPort,
        pending_store: PendingActionStorePort,
        llm: LLMPort,
        hub_name: str = "InnoviaHub",
        pending_ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._bookings = booking_store
        self._directory = directory
        self._pending = pending_store
        self._llm = llm
        self._hub_name = hub_name
        self._pending_ttl_seconds = pending_ttl_seconds
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def handle_intent(self, user_id: str, intent: BookingIntent, history: list[ChatMessage]) -> ActionResponse:
        if isinstance(intent, CreateBookingIntent):
            return self.handle_create(user_id, intent, history)
        if isinstance(intent, DeleteBookingIntent):
            return self.handle_delete(user_id, intent, history)
        if isinstance(intent, EditBookingIntent):
            return self.handle_edit(user_id, intent, history)
        if isinstance(intent, ShowBookingsIntent):
            return self.handle_show(user_id, intent, history)
        if isinstance(intent, FreeformReply):
            history.append(ChatMessage("assistant", intent.text))
            return ActionResponse(answer=intent.text)
        raise TypeError(f"Unsupported intent: {type(intent).__name__}")

    # ---- proposals ----

    def handle_create(self, user_id: str, intent: CreateBookingIntent, history: list[ChatMessage]) -> ActionResponse:
        if not is_known_time_slot(intent.time_slot):
            return self._unknown_slot_reply(user_id, ActionKind.create, intent.time_slot, history)

        time_slot = normalize_time_slot(intent.time_slot)
        type_name = self._directory.get_type_name(intent.resource_type_id)
        pending_booking = PendingBooking(
            date=intent.date,
            time_slot=time_slot,
            resource_type_id=intent.resource_type_id,
            resource_type_name=type_name,
        )
        action = PendingAction(
            kind=ActionKind.create,
            date=intent.date,
            time_slot=time_slot,
            resource_type_id=intent.resource_type_id,
            resource_type_name=type_name,
            created_at=self._clock(),
        )
        self._propose(user_id, action, pending_booking)

        when = _describe(intent.date, time_slot)
        answer = self._compose(
            history,
            f"Write a friendly, natural message to the user to confirm a proposed booking of a "
            f"{type_name} on {when}. Keep it short and pleasant. You cannot book by yourself - "
            f"the user needs to press the confirm button.",
            f"I can book a {type_name} for you on {when}. Please confirm the booking.",
        )
        return ActionResponse(
            answer=answer,
            pending_booking=pending_booking,
            awaiting_confirmation=True,
            action_type=ActionKind.create,
        )

    def handle_delete(self, user_id: str, intent: DeleteBookingIntent, history: list[ChatMessage]) -> ActionResponse:
        time_slot = normalize_time_slot(intent.time_slot)
        existing = self._bookings.find_by_details(user_id, intent.date, time_slot, intent.resource_type_id)
        if existing is None:
            self._logger.info(
                "Booking to delete not found",
                extra={"user_id": user_id, "action": ActionKind.delete.value},
            )
            return self._direct_reply(history, "I couldn't find a booking with those details.")

        type_name = self._directory.get_type_name(intent.resource_type_id)
        action = PendingAction(
            kind=ActionKind.delete,
            booking_id=existing.id,
            date=intent.date,
            time_slot=time_slot,
            resource_type_id=intent.resource_type_id,
            resource_type_name=type_name,
            created_at=self._clock(),
        )
        self._propose(user_id, action, None)

        when = _describe(intent.date, time_slot)
        answer = self._compose(
            history,
            f"Write a friendly message asking the user to confirm deletion of their booking for "
            f"{type_name} on {when}. Keep it short and ask for confirmation.",
            f"Are you sure you want to delete your {type_name} booking on {when}?",
        )
        return ActionResponse(
            answer=answer,
            pending_booking=PendingBooking(intent.date, time_slot, intent.resource_type_id, type_name),
            awaiting_confirmation=True,
            action_type=ActionKind.delete,
        )

    def handle_edit(self, user_id: str, intent: EditBookingIntent, history: list[ChatMessage]) -> ActionResponse:
        current_slot = normalize_time_slot(intent.current_time_slot)
        existing = self._bookings.find_by_details(
            user_id, intent.current_date, current_slot, intent.current_resource_type_id
        )
        if existing is None:
            self._logger.info(
                "Booking to edit not found",
                extra={"user_id": user_id, "action": ActionKind.edit.value},
            )
            return self._direct_reply(history, "I couldn't find a booking with those details to edit.")

        if not is_known_time_slot(intent.new_time_slot):
            return self._unknown_slot_reply(user_id, ActionKind.edit, intent.new_time_slot, history)

        new_slot = normalize_time_slot(intent.new_time_slot)
        new_type_name = self._directory.get_type_name(intent.new_resource_type_id)
        pending_booking = PendingBooking(intent.new_date, new_slot, intent.new_resource_type_id, new_type_name)
        action = PendingAction(
            kind=ActionKind.edit,
            booking_id=existing.id,
            date=intent.new_date,
            time_slot=new_slot,
            resource_type_id=intent.new_resource_type_id,
            resource_type_name=new_type_name,
            created_at=self._clock(),
        )
        self._propose(user_id, action, pending_booking)

        current_type_name = self._directory.get_type_name(intent.current_resource_type_id)
        before = f"{current_type_name} on {_describe(intent.current_date, current_slot)}"
        after = f"{new_type_name} on {_describe(intent.new_date, new_slot)}"
        answer = self._compose(
            history,
            f"Write a friendly message asking the user to confirm changing their booking from "
            f"{before} to {after}. Keep it short and clear.",
            f"Would you like to change your booking from {before} to {after}?",
        )
        return ActionResponse(
            answer=answer,
            pending_booking=pending_booking,
            awaiting_confirmation=True,
            action_type=ActionKind.edit,
        )

    def handle_show(self, user_id: str, intent: ShowBookingsIntent, history: list[ChatMessage]) -> ActionResponse:
        if intent.date is not None:
            bookings = self._bookings.list_by_date_for_user(intent.date, user_id)
        else:
            bookings = self._bookings.list_by_user(user_id)

        if bookings:
            listing = "\n".join(self._describe_booking(b) for b in bookings)
            fallback = f"Here are your bookings:\n{listing}"
        else:
            listing = "No bookings found."
            fallback = "You don't have any bookings."

        answer = self._compose(
            history,
            f"Here are the bookings:\n{listing}\n\nPresent these in a friendly, clear format to the user. "
            f"Always include the booking ID.",
            fallback,
        )
        return ActionResponse(answer=answer)

    # ---- confirmation ----

    def confirm_action(self, user_id: str, confirm: bool, history: list[ChatMessage] | None = None) -> ConfirmResult:
        convo = history if history is not None else []

        # removes the proposal before committing so a double submit commits at most once
        taken = self._pending.take(user_id)
        if taken is None:
            self._logger.info("Confirm without pending action", extra={"user_id": user_id})
            return ConfirmResult(outcome=ConfirmOutcome.no_pending_action, error=NO_PENDING_ACTION)

        action, pending_booking = taken
        if self._is_expired(action):
            self._logger.info(
                "Pending action expired",
                extra={"user_id": user_id, "action": action.kind.value},
            )
            return ConfirmResult(outcome=ConfirmOutcome.no_pending_action, error=NO_PENDING_ACTION)

        if not confirm:
            self._logger.info(
                "Pending action cancelled",
                extra={"user_id": user_id, "action": action.kind.value, "outcome": ConfirmOutcome.cancelled.value},
            )
            message = self._compose(
                convo,
                "Write a short, friendly message confirming that the requested action was cancelled.",
                "Action cancelled.",
            )
            return ConfirmResult(outcome=ConfirmOutcome.cancelled, message=message)

        try:
            if action.kind is ActionKind.create:
                result = self._commit_create(user_id, action, pending_booking, convo)
            elif action.kind is ActionKind.delete:
                result = self._commit_delete(action, convo)
            elif action.kind is ActionKind.edit:
                result = self._commit_edit(action, convo)
            else:
                result = ConfirmResult(outcome=ConfirmOutcome.failed, error="Unknown action type.")
        except Exception as e:
            self._logger.exception(
                "Failed to commit pending action",
                extra={"user_id": user_id, "action": action.kind.value, "error": str(e)},
            )
            return ConfirmResult(
                outcome=ConfirmOutcome.failed,
                error="Failed to process action",
                details=str(e),
            )

        self._logger.info(
            "Pending action resolved",
            extra={
                "user_id": user_id,
                "action": action.kind.value,
                "booking_id": result.booking_id or action.booking_id,
                "outcome": result.outcome.value,
            },
        )
        return result

    def _commit_create(
        self,
        user_id: str,
        action: PendingAction,
        pending_booking: PendingBooking | None,
        convo: list[ChatMessage],
    ) -> ConfirmResult:
        if pending_booking is None:
            if action.date is None or action.time_slot is None or action.resource_type_id is None:
                return ConfirmResult(outcome=ConfirmOutcome.failed, error="No pending booking found.")
            pending_booking = PendingBooking(
                action.date,
                action.time_slot,
                action.resource_type_id,
                action.resource_type_name or self._directory.get_type_name(action.resource_type_id),
            )

        when = _describe(pending_booking.date, pending_booking.time_slot)
        try:
            booking = self._bookings.create(
                pending_booking.date,
                pending_booking.time_slot,
                pending_booking.resource_type_id,
                user_id,
            )
        except NoAvailabilityError:
            message = self._compose(
                convo,
                f"Inform the user in a short friendly sentence that the selected time slot {when} is "
                f"already taken and suggest choosing another time or date.",
                f"Sorry, the {pending_booking.resource_type_name} time slot {when} is already taken. "
                f"Please choose another time or date.",
            )
            return ConfirmResult(outcome=ConfirmOutcome.unavailable, message=message)

        message = self._compose(
            convo,
            f"Write a short friendly confirmation message: the booking for "
            f"{pending_booking.resource_type_name} on {when} has been created.",
            f"Booking confirmed! {pending_booking.resource_type_name} on {when}.",
        )
        return ConfirmResult(outcome=ConfirmOutcome.committed, message=message, booking_id=booking.id)

    def _commit_delete(self, action: PendingAction, convo: list[ChatMessage]) -> ConfirmResult:
        if action.booking_id is None:
            return ConfirmResult(outcome=ConfirmOutcome.failed, error="Invalid booking ID.")

        when = _describe(action.date, action.time_slot)
        if not self._bookings.delete(action.booking_id):
            message = self._compose(
                convo,
                "Tell the user briefly that the booking no longer exists, so nothing was deleted.",
                "That booking no longer exists, so there was nothing to delete.",
            )
            return ConfirmResult(outcome=ConfirmOutcome.not_found, message=message)

        message = self._compose(
            convo,
            f"Write a short friendly message confirming deletion: the booking for "
            f"{action.resource_type_name} on {when} has been deleted.",
            f"Booking deleted successfully. {action.resource_type_name} on {when}.",
        )
        return ConfirmResult(outcome=ConfirmOutcome.committed, message=message, booking_id=action.booking_id)

    def _commit_edit(self, action: PendingAction, convo: list[ChatMessage]) -> ConfirmResult:
        if (
            action.booking_id is None
            or action.date is None
            or action.time_slot is None
            or action.resource_type_id is None
        ):
            return ConfirmResult(outcome=ConfirmOutcome.failed, error="Invalid edit data.")

        when = _describe(action.date, action.time_slot)
        try:
            booking = self._bookings.update(
                action.booking_id,
                action.date,
                action.time_slot,
                action.resource_type_id,
            )
        except NoAvailabilityError:
            message = self._compose(
                convo,
                f"Inform the user in a short friendly sentence that their booking could not be moved "
                f"because {action.resource_type_name} on {when} is already taken.",
                f"Sorry, {action.resource_type_name} on {when} is already taken, so your booking was not changed.",
            )
            return ConfirmResult(outcome=ConfirmOutcome.unavailable, message=message)
        except BookingNotFoundError:
            message = self._compose(
                convo,
                "Tell the user briefly that the booking they wanted to change no longer exists.",
                "That booking no longer exists, so it could not be changed.",
            )
            return ConfirmResult(outcome=ConfirmOutcome.not_found, message=message)

        message = self._compose(
            convo,
            f"Write a short friendly message confirming the update: new booking is "
            f"{action.resource_type_name} on {when}.",
            f"Booking updated! New booking: {action.resource_type_name} on {when}.",
        )
        return ConfirmResult(outcome=ConfirmOutcome.committed, message=message, booking_id=booking.id)

    # ---- helpers ----

    def _propose(self, user_id: str, action: PendingAction, booking: PendingBooking | None) -> None:
        previous = self._pending.propose(user_id, action, booking)
        self._logger.info(
            "Pending action proposed",
            extra={
                "user_id": user_id,
                "action": action.kind.value,
                "booking_id": action.booking_id,
                "replaced": previous.kind.value if previous else None,
            },
        )

    def _is_expired(self, action: PendingAction) -> bool:
        if self._pending_ttl_seconds is None:
            return False
        return action.age_seconds(self._clock()) > self._pending_ttl_seconds

    def _unknown_slot_reply(
        self, user_id: str, kind: ActionKind, time_slot: str, history: list[ChatMessage]
    ) -> ActionResponse:
        self._logger.info(
            "Unknown time slot requested",
            extra={"user_id": user_id, "action": kind.value, "time_slot": time_slot},
        )
        choices = ", ".join(display_time_slot(s) for s in TIME_SLOTS)
        return self._direct_reply(
            history,
            f"Sorry, {time_slot or 'that time'} is not a bookable time slot. "
            f"Please choose one of: {choices}.",
        )

    def _direct_reply(self, history: list[ChatMessage], text: str) -> ActionResponse:
        history.append(ChatMessage("assistant", text))
        return ActionResponse(answer=text)

    def _compose(self, history: list[ChatMessage], instruction: str, fallback: str) -> str:
        system = (
            f"You are a helpful booking assistant for {self._hub_name}. "
            f"Reply in the language the user speaks."
        )
        text = self._llm.compose_reply(history, f"{system}\n\n{instruction}", fallback) or fallback
        history.append(ChatMessage("assistant", text))
        return text

    def _describe_booking(self, booking: Booking) -> str:
        type_name = self._directory.get_type_name(booking.resource_type_id)
        return (
            f"- {booking.date.isoformat()} at {display_time_slot(booking.time_slot)}, "
            f"Resource: {type_name} (ID: {booking.id})"
        )


def _describe(booking_date, time_slot: str | None) -> str:
    day = booking_date.isoformat() if booking_date is not None else "the selected date"
    return f"{day} at {display_time_slot(time_slot or '')}"
