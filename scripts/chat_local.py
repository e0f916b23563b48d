#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable user id for the session
- Sends your typed messages through the same HandleChatUseCase as the API
- /yes and /no resolve the pending proposal
"""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from app.wiring.dependencies import get_container  # noqa: E402


def _print_header(user_id: str) -> None:
    print("\nLocal Booking Chat")
    print("-" * 60)
    print(f"user_id: {user_id}")
    print("Type your message and press Enter.")
    print("Commands: /yes, /no, /bookings, /history, /new, /quit, /help")
    print("-" * 60)


def main() -> None:
    user_id = os.getenv("CHAT_USER_ID", "local_user_1")
    container = get_container()
    use_case = container["use_case"]
    store = container["store"]
    bookings = container["bookings"]
    _print_header(user_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /yes      -> confirm the pending proposal")
            print("  /no       -> cancel the pending proposal")
            print("  /bookings -> list your bookings")
            print("  /history  -> show last 10 messages")
            print("  /new      -> start over as a new user id")
            print("  /quit     -> exit")
            continue
        if cmd == "/new":
            user_id = f"local_user_{int(time.time())}"
            print(f"New user_id: {user_id}")
            continue
        if cmd == "/history":
            print("\n--- History (last 10) ---")
            for message in store.get_recent_messages(user_id, limit=10):
                print(f"{message.role}: {message.content}")
            continue
        if cmd == "/bookings":
            for booking in bookings.list_by_user(user_id):
                print(f"#{booking.id} {booking.date} {booking.time_slot} type={booking.resource_type_id} resource={booking.resource_id}")
            continue
        if cmd in ("/yes", "/no"):
            result = use_case.confirm(user_id, cmd == "/yes")
            print(f"\n--- {result.outcome.value} ---")
            print(result.message or result.error)
            if result.details:
                print(f"details: {result.details}")
            continue

        try:
            response = use_case.handle(user_id, user_text)
        except Exception as e:
            print(f"ERROR: {e}")
            continue

        print("\n--- Reply ---")
        print(response.answer)
        if response.awaiting_confirmation:
            pending = response.pending_booking
            print(f"\n(pending {response.action_type.value}: {pending.resource_type_name} {pending.date} {pending.time_slot}; /yes or /no)")
        print("-" * 60)


if __name__ == "__main__":
    main()
