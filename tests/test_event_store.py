"""Tests for the append-only event store and its no-op fallbacks."""
from datetime import datetime, timezone

import pytest
from sqlalchemy import inspect

from database import models
from services import event_store as event_store_module
from services.event_store import (
    NullEventStore,
    SqlEventStore,
    clamp_intensity,
    decode_value,
    encode_value,
    to_stored_event,
)


@pytest.fixture
def store():
    """Fresh in-memory store for each test."""
    return SqlEventStore("sqlite://")


def _all_events(store):
    return store.read(lambda s: [to_stored_event(e) for e in s.query(models.Event).order_by(models.Event.id)], default=[])


def test_log_event_returns_increasing_ids(store):
    first = store.log_event("FOOD", "Pizza", "1 slice")
    second = store.log_event("WORKOUT", "Running", 45)
    assert first > 0
    assert second > first


def test_values_are_stored_as_tagged_payloads(store):
    store.log_event("FOOD", "Pasta", "200g")
    store.log_event("WORKOUT", "Running", 5.5)
    store.log_event("FOOD", "Pizza", {"ingredients": ["flour", "tomato"]})

    events = _all_events(store)
    assert [e.name for e in events] == ["Pasta", "Running", "Pizza"]
    assert events[0].value.kind == "text" and events[0].value.value == "200g"
    assert events[1].value.kind == "text" and events[1].value.value == "5.5"
    assert events[2].value.kind == "structured"
    assert events[2].value.value == {"ingredients": ["flour", "tomato"]}


def test_backdated_aware_timestamp_is_stored_as_utc(store):
    ts = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
    store.log_event("SLEEP", "Night", "7.5", timestamp=ts)
    events = _all_events(store)
    assert events[0].timestamp == datetime(2026, 3, 10, 12, 0)


def test_log_symptom_clamps_intensity(store):
    high = store.log_symptom("Nausea", 15)
    low = store.log_symptom("Nausea", 0)
    half = store.log_symptom("Nausea", 4.5)

    intensities = store.read(
        lambda s: {row.id: row.intensity for row in s.query(models.Symptom).all()}, default={}
    )
    assert intensities[high] == 10
    assert intensities[low] == 1
    assert intensities[half] == 5


def test_encode_value_variants():
    assert encode_value("abc") == ("text", "abc")
    assert encode_value(3) == ("text", "3")
    assert encode_value(None) == ("text", "")
    assert encode_value(True) == ("text", "true")
    assert encode_value(False) == ("text", "false")
    assert encode_value([1, 2]) == ("structured", "[1, 2]")


def test_decode_value_drops_malformed_json():
    assert decode_value("structured", "{not json") is None
    assert decode_value("text", "{not json").value == "{not json"
    assert decode_value("text", None) is None


def test_clamp_intensity_bounds():
    assert clamp_intensity(-3) == 1
    assert clamp_intensity(7.4) == 7
    assert clamp_intensity(11) == 10


def test_unavailable_store_degrades_to_noop(tmp_path, monkeypatch):
    """A failed first open disables the store for good without raising."""
    url = f"sqlite:///{tmp_path}/missing/dir/events.db"
    store = SqlEventStore(url)

    assert store.log_event("FOOD", "Pizza") == 0
    assert store.log_symptom("Nausea", 5) == 0
    assert store.read(lambda s: ["unexpected"], default=[]) == []
    assert store.available is False

    calls = []
    monkeypatch.setattr(event_store_module, "make_engine", lambda *a, **kw: calls.append(a))
    assert store.log_event("FOOD", "Pizza") == 0
    assert calls == []


def test_missing_driver_marks_store_unavailable(monkeypatch):
    """A database driver that is not installed disables the store like any open failure."""
    calls = []

    def missing_driver(url):
        calls.append(url)
        raise ModuleNotFoundError("No module named 'psycopg2'")

    monkeypatch.setattr(event_store_module, "make_engine", missing_driver)
    store = SqlEventStore("postgresql+psycopg2://u:p@localhost/nowhere")

    assert store.log_event("FOOD", "Pizza", "x") == 0
    assert store.log_symptom("Nausea", 5) == 0
    assert store.read(lambda s: ["unexpected"], default=[]) == []
    assert store.available is False
    assert len(calls) == 1


def test_schema_has_both_tables_and_four_indexes(store):
    def indexes(session):
        inspector = inspect(session.get_bind())
        return {
            table: {ix["name"] for ix in inspector.get_indexes(table)}
            for table in inspector.get_table_names()
        }

    assert store.read(indexes, default={}) == {
        "events": {"idx_events_timestamp", "idx_events_type"},
        "symptoms": {"idx_symptoms_timestamp", "idx_symptoms_name"},
    }


def test_bool_payload_round_trips(store):
    store.log_event("WORKOUT", "Fasted", True)
    [event] = _all_events(store)
    assert event.value.kind == "text"
    assert event.value.value == "true"


def test_null_event_store_interface():
    store = NullEventStore()
    assert store.available is False
    assert store.log_event("FOOD", "Pizza", "x") == 0
    assert store.log_symptom("Nausea", 3) == 0
    assert store.read(lambda s: 1, default="fallback") == "fallback"


def test_build_event_store_honours_disable_flag(monkeypatch):
    monkeypatch.setenv("BIO_EVENT_STORE_DISABLED", "true")
    assert isinstance(event_store_module.build_event_store(), NullEventStore)
    monkeypatch.setenv("BIO_EVENT_STORE_DISABLED", "0")
    assert isinstance(event_store_module.build_event_store(), SqlEventStore)
