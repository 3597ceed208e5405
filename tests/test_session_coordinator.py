import pytest

from dal.record_store import RecordStore
from services.navigation.session_coordinator import SessionCoordinator
from utils.errors import InputValidationError, SessionNotFoundError


def test_start_then_three_progress_steps(coordinator):
    session = coordinator.start_session({"totalSteps": 3})

    assert session.id
    assert session.progress == 0
    assert session.total_steps == 3
    assert session.is_active is True

    for _ in range(3):
        coordinator.record_progress(session.id)

    assert coordinator.get(session.id).progress == 3


def test_start_accepts_client_fields(coordinator):
    session = coordinator.start_session(
        {"userId": "anonymous", "currentInstruction": "Navigation started.", "totalSteps": 1}
    )

    assert session.user_id == "anonymous"
    assert session.current_instruction == "Navigation started."


def test_start_ignores_progress_and_unknown_fields(coordinator):
    session = coordinator.start_session({"progress": 7, "color": "blue"})

    assert session.progress == 0


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"totalSteps": -1}, "totalSteps"),
        ({"totalSteps": "many"}, "totalSteps"),
        ({"isActive": "perhaps"}, "isActive"),
    ],
)
def test_start_rejects_malformed_fields(coordinator, payload, field):
    with pytest.raises(InputValidationError) as excinfo:
        coordinator.start_session(payload)

    assert field in excinfo.value.fields
    assert coordinator.get_active() is None


def test_start_rejects_non_object_body(coordinator):
    with pytest.raises(InputValidationError):
        coordinator.start_session(["not", "a", "dict"])


def test_new_session_ends_previous_active_session(coordinator):
    first = coordinator.start_session({})
    second, ended = coordinator.start_session_with_ended({})

    assert [s.id for s in ended] == [first.id]
    previous = coordinator.get(first.id)
    assert previous.is_active is False
    assert previous.end_time is not None
    assert coordinator.get_active().id == second.id


def test_without_enforcement_first_active_session_wins():
    coordinator = SessionCoordinator(RecordStore(), enforce_single_active=False)
    first = coordinator.start_session({})
    coordinator.start_session({})

    assert coordinator.get(first.id).is_active is True
    assert coordinator.get_active().id == first.id


def test_update_session_applies_partial_fields(coordinator):
    session = coordinator.start_session({"totalSteps": 5, "currentInstruction": "Turn left"})

    updated = coordinator.update_session(session.id, {"progress": 2, "id": "ignored"})

    assert updated.id == session.id
    assert updated.progress == 2
    assert updated.current_instruction == "Turn left"
    assert updated.total_steps == 5


def test_update_session_rejects_negative_progress(coordinator):
    session = coordinator.start_session({})

    with pytest.raises(InputValidationError):
        coordinator.update_session(session.id, {"progress": -3})


def test_unknown_session_raises_not_found(coordinator):
    with pytest.raises(SessionNotFoundError):
        coordinator.record_progress("nope")
    with pytest.raises(SessionNotFoundError):
        coordinator.apply_instruction("nope", "Go straight")
    with pytest.raises(SessionNotFoundError):
        coordinator.update_session("nope", {"progress": 1})
    with pytest.raises(SessionNotFoundError):
        coordinator.end_session("nope")


def test_apply_instruction_sets_current_instruction(coordinator):
    session = coordinator.start_session({})

    coordinator.apply_instruction(session.id, "Stairs ahead in 3 meters")

    assert coordinator.get(session.id).current_instruction == "Stairs ahead in 3 meters"


def test_end_session_is_idempotent(coordinator):
    session = coordinator.start_session({})

    ended = coordinator.end_session(session.id)
    again = coordinator.end_session(session.id)

    assert ended.is_active is False
    assert again.end_time == ended.end_time
    assert coordinator.get_active() is None


def test_reactivating_a_session_ends_the_current_one(coordinator):
    first = coordinator.start_session({})
    second = coordinator.start_session({})

    revived, ended = coordinator.update_session_with_ended(first.id, {"isActive": True})

    assert revived.is_active is True
    assert [s.id for s in ended] == [second.id]
    assert coordinator.get(second.id).is_active is False
    assert [s.id for s in coordinator.store.list_active_sessions()] == [first.id]


def test_reactivating_unknown_session_leaves_active_session_running(coordinator):
    current = coordinator.start_session({})

    with pytest.raises(SessionNotFoundError):
        coordinator.update_session("nope", {"isActive": True})

    assert coordinator.get(current.id).is_active is True


def test_reactivation_without_enforcement_keeps_both_active():
    coordinator = SessionCoordinator(RecordStore(), enforce_single_active=False)
    first = coordinator.start_session({})
    coordinator.end_session(first.id)
    second = coordinator.start_session({})

    _, ended = coordinator.update_session_with_ended(first.id, {"isActive": True})

    assert ended == []
    assert coordinator.get(second.id).is_active is True
