from datetime import datetime

from app.application.utils.time_slots import TIME_SLOT_CHOICES

RESOURCE_TYPE_HINT = "1=Desk, 2=Meeting room, 3=VR Headset, 4=AI Server"


def build_intent_system_prompt(hub_name: str, now: datetime) -> str:
    return (
        f"You are a helpful booking assistant for {hub_name}.\n"
        "Users book desks, meeting rooms, VR headsets and AI servers in fixed two-hour slots.\n"
        "Rules:\n"
        "  - Use the provided functions to create, edit, delete or show bookings.\n"
        "  - Never claim a booking is done: the user confirms every change with a button.\n"
        f"  - Today's date is {now:%Y-%m-%d} and the current hour is {now.hour}. "
        "Time slots that have already passed cannot be booked.\n"
        "  - If details are missing, ask a short follow-up question instead of guessing.\n"
        "  - Reply in the language the user speaks.\n"
    )


def build_booking_tools(now: datetime) -> list[dict]:
    slot_enum = list(TIME_SLOT_CHOICES)
    today = f"{now:%Y-%m-%d}"

    return [
        _tool(
            "create_booking",
            f"Propose a booking for a resource. Today's date is {today} and the current hour is "
            f"{now.hour}. You cannot book time slots if the time has already passed.",
            {
                "date": {"type": "string", "description": "Date in YYYY-MM-DD format"},
                "timeSlot": {"type": "string", "enum": slot_enum},
                "resourceTypeId": {"type": "integer", "description": RESOURCE_TYPE_HINT},
            },
            ["date", "timeSlot", "resourceTypeId"],
        ),
        _tool(
            "delete_booking",
            "Delete an existing booking. When the user references a booking ID from a previously "
            "shown list, extract the corresponding date, time slot and resource type from the "
            f"conversation history. Today's date is {today}.",
            {
                "date": {"type": "string", "description": "Date in YYYY-MM-DD format"},
                "timeSlot": {"type": "string", "enum": slot_enum},
                "resourceTypeId": {"type": "integer", "description": RESOURCE_TYPE_HINT},
            },
            ["date", "timeSlot", "resourceTypeId"],
        ),
        _tool(
            "edit_booking",
            "Edit an existing booking. The user must provide the current booking details and the "
            f"new desired details. Today's date is {today} and the current hour is {now.hour}.",
            {
                "currentDate": {"type": "string", "description": "Current booking date in YYYY-MM-DD format"},
                "currentTimeSlot": {"type": "string", "enum": slot_enum},
                "currentResourceTypeId": {"type": "integer", "description": RESOURCE_TYPE_HINT},
                "newDate": {"type": "string", "description": "New booking date in YYYY-MM-DD format"},
                "newTimeSlot": {"type": "string", "enum": slot_enum},
                "newResourceTypeId": {"type": "integer", "description": RESOURCE_TYPE_HINT},
            },
            [
                "currentDate",
                "currentTimeSlot",
                "currentResourceTypeId",
                "newDate",
                "newTimeSlot",
                "newResourceTypeId",
            ],
        ),
        _tool(
            "show_bookings",
            "Show the user's bookings, optionally for one date. Always include the booking ID in "
            "your response so users can refer to it for deletion or editing.",
            {
                "date": {
                    "type": "string",
                    "description": "YYYY-MM-DD if the user asks about a specific date, otherwise omit",
                },
            },
            [],
        ),
    ]


def _tool(name: str, description: str, properties: dict, required: list[str]) -> dict:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        },
    }
