#!/usr/bin/env python3
from __future__ import annotations

import argparse

import httpx
from httpx import ConnectError


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a chat message (and optionally confirm) to a running server")
    parser.add_argument("--url", default="http://127.0.0.1:8001")
    parser.add_argument("--user", default="user_123")
    parser.add_argument("--text", default="Book a meeting room tomorrow 10:00-12:00")
    parser.add_argument("--confirm", choices=["yes", "no"], help="Resolve the proposal right away")
    args = parser.parse_args()

    headers = {"X-User-Id": args.user}
    try:
        resp = httpx.post(f"{args.url}/api/chat", json={"question": args.text}, headers=headers, timeout=30.0)
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn app.main:app --reload --port 8001")
        return

    print(resp.status_code)
    if resp.text:
        print(resp.text)

    if args.confirm and resp.is_success and resp.json().get("awaitingConfirmation"):
        resp = httpx.post(
            f"{args.url}/api/chat/confirmAction",
            json={"confirm": args.confirm == "yes"},
            headers=headers,
            timeout=30.0,
        )
        print(resp.status_code)
        if resp.text:
            print(resp.text)


if __name__ == "__main__":
    main()
