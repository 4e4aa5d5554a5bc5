import re
import pytest
from schemas import StoredState, Subject
from slot_allocator import generate_timetable
from storage import TimetableStore, LocalStateStore, RecordNotFoundError, generate_record_id


def test_generated_ids():
    record_id = generate_record_id()

    assert re.fullmatch(r"[0-9a-z]+-[0-9a-z]{6}", record_id)
    assert generate_record_id() != record_id


def test_save_and_get_verbatim():
    store = TimetableStore()
    payload = {"sections": [{"name": "Section A", "grid": [["Math"]]}], "anything": [1, 2, 3]}

    record_id = store.save(payload, teacher_name="Ms. Rao")
    record = store.get(record_id)

    assert record.id == record_id
    assert record.teacher_name == "Ms. Rao"
    assert record.payload == payload


def test_save_with_explicit_id_replaces():
    store = TimetableStore()
    store.save({"version": 1}, record_id="week-1")
    store.save({"version": 2}, record_id="week-1", teacher_name="Mr. Lee")

    assert len(store) == 1
    assert store.get("week-1").payload == {"version": 2}


def test_blank_id_gets_generated():
    store = TimetableStore()

    assert store.save({}, record_id="") != ""


def test_missing_record():
    with pytest.raises(RecordNotFoundError):
        TimetableStore().get("nope")


def test_list_summaries():
    store = TimetableStore()
    store.save({}, record_id="a", teacher_name="Ms. Rao")
    store.save({}, record_id="b")

    summaries = [s.model_dump(by_alias=True) for s in store.list()]
    assert summaries == [{"id": "a", "teacherName": "Ms. Rao"}, {"id": "b", "teacherName": None}]


def test_local_state_round_trip(tmp_path):
    state_store = LocalStateStore(tmp_path / "state.json")
    timetable = generate_timetable([{"name": "Math", "sessions_per_week": 2}], ["Monday", "Tuesday"], 1, 1)
    state = StoredState(
        subjects=[Subject(name="Math", sessions_per_week=2)],
        selected_days=["Monday", "Tuesday"],
        periods_per_day=1,
        timetable=timetable,
    )

    assert state_store.load() is None
    state_store.save(state)

    assert state_store.load() == state


def test_local_state_corrupt_file(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json")

    assert LocalStateStore(path).load() is None


def test_local_state_clear(tmp_path):
    state_store = LocalStateStore(tmp_path / "state.json")
    state_store.save(StoredState())
    state_store.clear()
    state_store.clear()

    assert state_store.load() is None


def test_local_state_undecodable_file(tmp_path):
    path = tmp_path / "state.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    assert LocalStateStore(path).load() is None
