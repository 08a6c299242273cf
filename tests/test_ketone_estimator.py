"""Tests for the blood ketone estimator."""
from datetime import datetime

from schemas.bio_schema import MealLog
from services.ketone_estimator import carb_memory, estimate_ketones, fasting_curve, hours_fasted, is_workout_log

NOON = datetime(2026, 3, 10, 12, 0)


def test_high_carb_day_is_out_of_ketosis():
    for hours_ago in ("11:00", "00:00"):
        logs = [{"time": hours_ago, "meal_type": "WORKOUT"}]
        assert estimate_ketones(logs, 60, 20000, yesterday_carbs=5, now=NOON) == 0.1
    assert estimate_ketones([], 60, 0, yesterday_carbs=200, now=NOON) == 0.1


def test_twelve_hours_fasted_low_carb():
    logs = [{"time": "00:00"}]
    assert estimate_ketones(logs, 5, 0, yesterday_carbs=0, now=NOON) == 0.3


def test_default_twelve_hours_without_meals():
    assert hours_fasted([], NOON) == 12.0
    assert estimate_ketones([], 5, 0, now=NOON) == 0.3


def test_hours_fasted_from_yesterday_last_meal():
    now = datetime(2026, 3, 10, 9, 30)
    assert hours_fasted([], now, "21:30") == 12.0
    assert hours_fasted([{"time": "bogus"}], now, "21:30") == 12.0


def test_latest_meal_today_wins():
    logs = [MealLog(time="07:00"), MealLog(time="10:00", meal_type="BREAKFAST")]
    assert hours_fasted(logs, NOON, "21:30") == 2.0
    assert estimate_ketones(logs, 5, 0, now=NOON) == 0.1


def test_fasting_curve_pieces():
    assert fasting_curve(3.9, 5) == 0.1
    assert fasting_curve(8, 5) == 0.2
    assert abs(fasting_curve(20, 5) - 0.61) < 1e-9
    assert abs(fasting_curve(20, 15) - 0.506) < 1e-9
    assert abs(fasting_curve(20, 30) - 0.41) < 1e-9


def test_activity_bonuses():
    logs = [{"time": "04:00"}]  # 8h fasted -> 0.2
    assert estimate_ketones(logs, 5, 12000, now=NOON) == 0.3
    assert estimate_ketones(logs + [{"label": "ESERCIZIO"}], 5, 0, now=NOON) == 0.3
    assert estimate_ketones([{"time": "00:00"}, {"meal_type": "WORKOUT"}], 5, 0, now=datetime(2026, 3, 10, 20, 0)) == 0.7


def test_yesterday_heavy_carbs_dampen():
    now = datetime(2026, 3, 10, 20, 0)
    logs = [{"time": "00:00"}]  # 20h -> 0.61
    assert estimate_ketones(logs, 5, 0, yesterday_carbs=80, now=now) == 0.2
    assert estimate_ketones(logs, 5, 0, yesterday_carbs=30, now=now) == 0.3
    assert estimate_ketones(logs, 5, 0, yesterday_carbs=20, now=now) == 0.5


def test_carb_memory_caps_short_fasts():
    assert carb_memory(1.0, 10, 30) == 0.35
    assert carb_memory(1.0, 10, 20) == 0.4
    assert carb_memory(1.0, 10, None) == 1.0


def test_result_stays_within_bounds():
    late = datetime(2026, 3, 10, 23, 59)
    for carbs in (0, 15, 30, 50):
        for yesterday in (None, 10, 20, 40, 120):
            value = estimate_ketones([{"meal_type": "WORKOUT"}], carbs, 25000, yesterday, "00:00", now=late)
            assert 0 <= value <= 3.5


def test_workout_tags():
    assert is_workout_log({"meal_type": "EXERCISE"})
    assert is_workout_log(MealLog(label="WORKOUT"))
    assert not is_workout_log({"meal_type": "LUNCH"})
