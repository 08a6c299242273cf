"""Tests for the composite physiological scores and coach messages."""
from services.bio_scorer import (
    coach_message,
    compute_cns_battery,
    compute_glycogen,
    compute_hydration,
    compute_readiness,
    compute_scores,
    salt_advice,
    weather_condition,
)


def test_extreme_inputs_stay_in_range():
    for sleep, hrv, kcal, carbs, steps, temp in [
        (20, 500, 0, 1000, 0, -40),
        (0, 0, 5000, 0, 100000, 60),
        (None, None, 0, 0, 0, None),
    ]:
        scores = compute_scores(sleep, hrv, kcal, carbs, steps, temp)
        for value in (scores.readiness, scores.cns_battery, scores.glycogen, scores.hydration):
            assert 0 <= value <= 100


def test_readiness_uses_sleep_when_hrv_missing():
    assert compute_readiness(8, None) == 100
    assert compute_readiness(4, None) == 50
    assert compute_readiness(4, 60) == 50


def test_cns_battery_falls_back_to_sleep():
    assert compute_cns_battery(60, 0) == 50
    assert compute_cns_battery(None, 4) == 50
    assert compute_cns_battery(0, 8) == 100


def test_glycogen_and_hydration():
    assert compute_glycogen(150, 0) == 90
    assert compute_glycogen(0, 50) == 100
    assert compute_hydration(30, 4000) == 78
    assert compute_hydration(20, 0) == 100


def test_coach_message_priority_chain():
    assert coach_message(10, 10, 0, loading=True) == "Loading data..."
    assert coach_message(10, 10, 5) == "It's cold. Extended warm-up required."
    assert coach_message(40, 10, 20) == "Battery low. Prioritize recovery."
    assert coach_message(60, 30, 20) == "Nervous system under stress. Active recovery is better today."
    assert coach_message(80, 70, 20) == "System ready. You can push safely."
    assert coach_message(60, 50, 20) == "Status normal. Keep up hydration and sleep."


def test_missing_temperature_defaults_to_20c():
    scores = compute_scores(8, 60, 0, 0, 0)
    assert scores.hydration == 100
    assert scores.salt_advice == "Thermal conditions ok. Standard hydration."


def test_salt_advice_and_weather_codes():
    assert salt_advice(30).startswith("Intense heat")
    assert salt_advice(5).startswith("Cold")
    assert weather_condition(0) == "Clear"
    assert weather_condition(2) == "Cloudy"
    assert weather_condition(45) == "Fog"
    assert weather_condition(61) == "Snow"
    assert weather_condition(95) == "Variable"
