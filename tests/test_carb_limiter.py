"""Tests for the adaptive carbohydrate limiter."""
import pytest

from core.config import InferenceSettings
from services.carb_limiter import compute_carb_limit, explain_carb_limit, sleep_factor, steps_bonus, workout_bonus


def test_steps_bonus_adds_50g_between_6000_and_16000():
    assert steps_bonus(6000) == 0
    assert steps_bonus(16000) - steps_bonus(6000) == 50
    assert steps_bonus(7500) == 7.5


def test_workout_bonus_uses_category_multiplier():
    assert workout_bonus(300, "anaerobic") == 22.5
    assert workout_bonus(300, "aerobic_intense") == pytest.approx(18.0)
    assert workout_bonus(300, "low") == pytest.approx(12.0)
    assert workout_bonus(300, None) == 15.0


def test_sleep_factor_tiers():
    assert sleep_factor(None) == 1.0
    assert sleep_factor(7) == 1.0
    assert sleep_factor(6.5) == 0.9
    assert sleep_factor(5.9) == 0.75


def test_steps_alone_are_capped_at_50g():
    breakdown = explain_carb_limit(25, steps_bonus(16000), 0, 1.0, 1.0)
    assert breakdown.safety_cap_applied is True
    assert breakdown.pre_penalty_total == 50
    assert breakdown.limit_grams == 50


def test_cap_applies_before_penalties():
    assert compute_carb_limit(25, steps_bonus(30000), 4, 0.9, 1.0) == 45


def test_real_workout_overrides_cap():
    breakdown = explain_carb_limit(25, steps_bonus(16000), 10, 1.0, 1.0)
    assert breakdown.safety_cap_applied is False
    assert breakdown.limit_grams == 85


def test_penalties_multiply():
    breakdown = explain_carb_limit(90, 0, 10, 0.75, 0.5)
    assert breakdown.unrounded_limit == 37.5
    assert breakdown.limit_grams == 38


def test_explicit_override_wins():
    breakdown = explain_carb_limit(25, 50, 40, 0.75, 0.5, explicit_override=42.4)
    assert breakdown.override_applied is True
    assert breakdown.limit_grams == 42


def test_configurable_safety_cap():
    settings = InferenceSettings(carb_safety_cap_grams=30)
    assert compute_carb_limit(25, steps_bonus(10000), 0, 1.0, 1.0, settings=settings) == 30
