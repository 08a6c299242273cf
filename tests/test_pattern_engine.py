"""Tests for the monthly Clue/Evidence pattern engine."""
from datetime import datetime, timedelta

import pytest

from core.config import InferenceSettings
from database import models
from services.event_store import NullEventStore, SqlEventStore
from services.pattern_engine import MonthlyPatternEngine, extract_ingredients, month_bounds, pattern_engine

PIZZA = {"grams": 300, "ingredients": ["flour", "tomato", "mozzarella"]}


@pytest.fixture
def store():
    return SqlEventStore("sqlite://")


def _pizza_then_bloating(store, days, value=PIZZA):
    for day in days:
        episode = datetime(2026, 3, day, 21, 0)
        store.log_event("FOOD", "Pizza", value, timestamp=episode - timedelta(hours=2))
        store.log_symptom("Gonfiore", 6, timestamp=episode)


def test_two_days_is_a_clue(store):
    _pizza_then_bloating(store, [3, 10])
    patterns = pattern_engine.get_monthly_patterns(store, 2026, 3)
    assert len(patterns) == 1
    p = patterns[0]
    assert (p.event_type, p.event_name, p.symptom_name) == ("FOOD", "Pizza", "Gonfiore")
    assert p.count == 2
    assert p.tier == "Clue"
    assert [d.day for d in p.symptom_dates] == [3, 10]
    assert p.ingredients == ["flour", "tomato", "mozzarella"]


def test_three_days_is_evidence(store):
    _pizza_then_bloating(store, [3, 10, 17])
    patterns = pattern_engine.get_monthly_patterns(store, 2026, 3)
    assert [(p.count, p.tier) for p in patterns] == [(3, "Evidence")]


def test_single_coincidence_yields_nothing(store):
    _pizza_then_bloating(store, [3])
    assert pattern_engine.get_monthly_patterns(store, 2026, 3) == []


def test_same_day_entries_count_once(store):
    _pizza_then_bloating(store, [3])
    store.log_event("FOOD", "Pizza", PIZZA, timestamp=datetime(2026, 3, 3, 22, 0))
    store.log_symptom("Gonfiore", 7, timestamp=datetime(2026, 3, 3, 23, 0))
    assert pattern_engine.get_monthly_patterns(store, 2026, 3) == []


def test_episodes_outside_month_are_ignored(store):
    _pizza_then_bloating(store, [3, 10])
    assert pattern_engine.get_monthly_patterns(store, 2026, 4) == []
    assert pattern_engine.get_monthly_patterns(store, 2026, 2) == []


def test_text_payload_has_no_ingredients(store):
    _pizza_then_bloating(store, [3, 10], value="two slices")
    patterns = pattern_engine.get_monthly_patterns(store, 2026, 3)
    assert patterns[0].ingredients is None
    assert "ingredients" not in patterns[0].model_dump(exclude_none=True)


def test_sorted_by_count_descending(store):
    _pizza_then_bloating(store, [3, 10, 17])
    for day in (5, 12):
        episode = datetime(2026, 3, day, 9, 0)
        store.log_event("WORKOUT", "Running", "10km", timestamp=episode - timedelta(hours=1))
        store.log_symptom("Fatigue", 5, timestamp=episode)
    patterns = pattern_engine.get_monthly_patterns(store, 2026, 3)
    assert [(p.event_name, p.tier) for p in patterns] == [("Pizza", "Evidence"), ("Running", "Clue")]


def test_unavailable_store_returns_empty():
    assert pattern_engine.get_monthly_patterns(NullEventStore(), 2026, 3) == []


def test_configurable_tiers(store):
    _pizza_then_bloating(store, [3, 10])
    engine = MonthlyPatternEngine(InferenceSettings(pattern_clue_count=1, pattern_evidence_count=2))
    assert [p.tier for p in engine.get_monthly_patterns(store, 2026, 3)] == ["Evidence"]


def test_extract_ingredients_edge_cases():
    ok = models.Event(type="FOOD", name="Pizza", value='{"ingredients": ["flour", 3, "basil"]}', value_kind="structured")
    broken = models.Event(type="FOOD", name="Pizza", value='{"ingredients": [', value_kind="structured")
    workout = models.Event(type="WORKOUT", name="Run", value='{"ingredients": ["x"]}', value_kind="structured")
    empty = models.Event(type="FOOD", name="Water", value='{"ingredients": []}', value_kind="structured")
    assert extract_ingredients(ok) == ["flour", "basil"]
    assert extract_ingredients(broken) is None
    assert extract_ingredients(workout) is None
    assert extract_ingredients(empty) is None


def test_month_bounds_december():
    start, end = month_bounds(2025, 12)
    assert start == datetime(2025, 12, 1)
    assert end == datetime(2026, 1, 1)
