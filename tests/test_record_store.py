import pytest

from dal.record_store import RecordStore
from utils.errors import InputValidationError, SessionNotFoundError


def test_created_ids_are_unique_per_kind(store):
    """Every create hands out an identifier no earlier record of that kind has."""
    session_ids = {store.create_session().id for _ in range(200)}
    object_ids = {store.create_detected_object(name=f"cone {i}").id for i in range(200)}
    event_ids = {store.create_audio_event(type="speech", content=f"word {i}").id for i in range(200)}
    text_ids = {store.create_recognized_text(type="sign", content=f"Gate {i}").id for i in range(200)}

    assert len(session_ids) == 200
    assert len(object_ids) == 200
    assert len(event_ids) == 200
    assert len(text_ids) == 200


def test_create_session_fills_defaults(store):
    session = store.create_session(total_steps=3)

    assert session.id
    assert session.progress == 0
    assert session.total_steps == 3
    assert session.is_active is True
    assert session.end_time is None
    assert session.start_time is not None


def test_get_active_session_is_none_when_nothing_active(store):
    assert store.get_active_session() is None

    session = store.create_session()
    store.update_session(session.id, is_active=False)

    assert store.get_active_session() is None


def test_get_active_session_returns_first_active_in_insertion_order(store):
    store.create_session(is_active=False)
    first = store.create_session()
    store.create_session()

    active = store.get_active_session()

    assert active is not None
    assert active.is_active is True
    assert active.id == first.id


def test_update_merges_only_given_fields(store):
    session = store.create_session(user_id="anonymous", current_instruction="Go", total_steps=4)

    store.update_session(session.id, progress=2)
    reread = store.get_session(session.id)

    assert reread.progress == 2
    assert reread.user_id == "anonymous"
    assert reread.current_instruction == "Go"
    assert reread.total_steps == 4
    assert reread.start_time == session.start_time


def test_update_unknown_session_raises_and_leaves_store_unchanged(store):
    session = store.create_session()
    before = store.counts()

    with pytest.raises(SessionNotFoundError):
        store.update_session("does-not-exist", progress=5)

    assert store.counts() == before
    assert store.get_session(session.id).progress == 0


def test_update_rejects_immutable_fields(store):
    session = store.create_session()

    with pytest.raises(InputValidationError) as excinfo:
        store.update_session(session.id, id="other", start_time=None)

    assert excinfo.value.fields == ["id", "start_time"]


def test_increment_progress_adds_one_each_time(store):
    session = store.create_session(total_steps=3)

    for _ in range(3):
        store.increment_session_progress(session.id)

    assert store.get_session(session.id).progress == 3


def test_list_by_session_filters_on_session_id(store):
    store.create_detected_object(name="bench", session_id="a")
    store.create_detected_object(name="door", session_id="b")
    store.create_detected_object(name="stairs")  # orphan records are allowed

    assert [obj.name for obj in store.list_detected_objects("a")] == ["bench"]
    assert store.list_detected_objects("missing") == []


def test_list_recent_is_bounded_filtered_and_newest_first():
    store = RecordStore()
    for i in range(15):
        store.create_recognized_text(type="sign", content=f"Gate {i}", session_id="s1")
    store.create_recognized_text(type="sign", content="Other", session_id="s2")

    recent = store.list_recent_recognized_texts("s1", limit=10)

    assert len(recent) == 10
    assert all(text.session_id == "s1" for text in recent)
    stamps = [text.timestamp for text in recent]
    assert stamps == sorted(stamps, reverse=True)
    # Equal timestamps fall back to newest insertion first.
    assert recent[0].content == "Gate 14"


def test_list_recent_audio_events_default_limit(store):
    for i in range(12):
        store.create_audio_event(type="traffic", content=str(i), session_id="s1", audio_level=40)

    assert len(store.list_recent_audio_events("s1")) == 10


def test_records_render_camel_case(store):
    obj = store.create_detected_object(name="bench", session_id="s1", distance="2m", confidence=80)

    wire = obj.to_dict()

    assert wire["sessionId"] == "s1"
    assert wire["name"] == "bench"
    assert wire["confidence"] == 80
    assert isinstance(wire["timestamp"], str)
