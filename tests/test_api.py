from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.application.exceptions import LLMUpstreamError
from app.application.use_cases.handle_chat import HandleChatUseCase
from app.main import app
from app.wiring.dependencies import (
    get_availability_matcher,
    get_booking_store,
    get_handle_chat_use_case,
    get_resource_directory,
)

ALICE = {"X-User-Id": "alice"}


@pytest.fixture
def client(conversation_store, llm, dispatcher, booking_store, directory, matcher):
    app.dependency_overrides[get_handle_chat_use_case] = lambda: HandleChatUseCase(
        store=conversation_store, llm=llm, dispatcher=dispatcher
    )
    app.dependency_overrides[get_booking_store] = lambda: booking_store
    app.dependency_overrides[get_resource_directory] = lambda: directory
    app.dependency_overrides[get_availability_matcher] = lambda: matcher
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_requests_without_identity_are_rejected(client):
    assert client.post("/api/chat", json={"question": "hi"}).status_code == 401
    assert client.post("/api/chat/confirmAction", json={"confirm": True}).status_code == 401


def test_chat_propose_and_confirm(client):
    resp = client.post("/api/chat", json={"question": "Book a meeting room on 2025-10-10 08:00-10:00"}, headers=ALICE)
    assert resp.status_code == 200
    body = resp.json()
    assert body["awaitingConfirmation"] is True
    assert body["actionType"] == "create"
    assert body["pendingBooking"]["timeSlot"] == "08-10"
    assert body["pendingBooking"]["resourceTypeName"] == "meeting room"
    assert body["userName"] == "alice"

    resp = client.post("/api/chat/confirmAction", json={"confirm": True}, headers=ALICE)
    assert resp.status_code == 200
    assert "meeting room" in resp.json()["message"]
    booking_id = resp.json()["bookingId"]

    mine = client.get("/api/bookings/me", headers=ALICE).json()
    assert [b["id"] for b in mine] == [booking_id]
    assert mine[0]["timeSlot"] == "08-10"

    by_date = client.get("/api/bookings", params={"date": "2025-10-10"}, headers=ALICE).json()
    assert [b["id"] for b in by_date] == [booking_id]

    resp = client.post("/api/chat/confirmAction", json={"confirm": True}, headers=ALICE)
    assert resp.status_code == 400
    assert resp.json() == {"error": "No pending action found."}


def test_cancel(client):
    client.post("/api/chat", json={"question": "Book a desk on 2025-10-10 10-12"}, headers=ALICE)
    resp = client.post("/api/chat/confirmAction", json={"confirm": False}, headers=ALICE)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Action cancelled."}
    assert client.get("/api/bookings/me", headers=ALICE).json() == []


def test_available_resources(client, booking_store):
    from datetime import date

    booking_store.create(date(2025, 10, 10), "08-10", 1, "bob")
    params = {"resourceTypeId": 1, "date": "2025-10-10", "timeSlot": "08:00-10:00"}
    resp = client.get("/api/resources/available", params=params)
    assert resp.status_code == 200
    assert [r["name"] for r in resp.json()] == ["Desk 2"]

    params["timeSlot"] = "07-09"
    assert client.get("/api/resources/available", params=params).status_code == 400


def test_llm_outage_maps_to_bad_gateway(client, conversation_store, dispatcher):
    class DownLLM:
        def extract_intent(self, history):
            raise LLMUpstreamError("OpenAI API error: timeout")

        def compose_reply(self, history, instruction, fallback):
            return fallback

    app.dependency_overrides[get_handle_chat_use_case] = lambda: HandleChatUseCase(
        store=conversation_store, llm=DownLLM(), dispatcher=dispatcher
    )
    resp = client.post("/api/chat", json={"question": "book a desk"}, headers=ALICE)
    assert resp.status_code == 502
