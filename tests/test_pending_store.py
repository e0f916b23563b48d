import threading
from datetime import date

from app.domain.entities.pending import ActionKind, PendingAction, PendingBooking
from app.infrastructure.store.memory_store import MemoryConversationStore, MemoryPendingActionStore

DAY = date(2025, 10, 10)


def _create(slot: str) -> tuple[PendingAction, PendingBooking]:
    booking = PendingBooking(DAY, slot, 2, "meeting room")
    action = PendingAction(kind=ActionKind.create, date=DAY, time_slot=slot, resource_type_id=2)
    return action, booking


def test_propose_overwrites_previous_proposal():
    store = MemoryPendingActionStore()
    first_action, first_booking = _create("08-10")
    second_action, second_booking = _create("10-12")

    assert store.propose("alice", first_action, first_booking) is None
    assert store.propose("alice", second_action, second_booking) is first_action

    assert store.peek("alice") == second_action
    assert store.peek_booking("alice") == second_booking


def test_proposal_without_booking_drops_stale_booking():
    store = MemoryPendingActionStore()
    action, booking = _create("08-10")
    store.propose("alice", action, booking)

    delete = PendingAction(kind=ActionKind.delete, booking_id=5)
    store.propose("alice", delete)

    assert store.peek("alice") == delete
    assert store.peek_booking("alice") is None


def test_users_are_isolated_and_resolve_clears_both_entries():
    store = MemoryPendingActionStore()
    action, booking = _create("08-10")
    store.propose("alice", action, booking)
    store.propose("bob", action, booking)

    store.resolve("alice")

    assert store.peek("alice") is None
    assert store.peek_booking("alice") is None
    assert store.peek("bob") == action
    store.resolve("nobody")


def test_take_consumes_the_proposal():
    store = MemoryPendingActionStore()
    action, booking = _create("08-10")
    store.propose("alice", action, booking)

    assert store.take("alice") == (action, booking)
    assert store.take("alice") is None
    assert store.peek("alice") is None


def test_concurrent_take_hands_the_proposal_to_one_caller():
    store = MemoryPendingActionStore()
    action, booking = _create("08-10")
    store.propose("alice", action, booking)

    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        results.append(store.take("alice"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len([r for r in results if r is not None]) == 1


def test_pending_action_age():
    action = PendingAction(kind=ActionKind.delete, booking_id=1, created_at=100.0)
    assert action.age_seconds(160.0) == 60.0
    assert action.age_seconds(50.0) == 0.0


def test_conversation_history_is_capped_and_copied():
    store = MemoryConversationStore(history_limit=3)
    for i in range(5):
        store.append_message("alice", "user", f"m{i}")

    history = store.get_history("alice")
    assert [m.content for m in history] == ["m2", "m3", "m4"]

    history.clear()
    assert len(store.get_history("alice")) == 3
    assert [m.content for m in store.get_recent_messages("alice", limit=2)] == ["m3", "m4"]
    assert store.get_history("bob") == []
