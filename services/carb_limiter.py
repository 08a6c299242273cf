"""Adaptive carbohydrate limiter.

The daily net-carb ceiling starts at the protocol baseline, grows with steps
and workout energy, and shrinks with sleep debt and an active symptom.
Without a real workout bonus the pre-penalty total is capped so that step
counting alone cannot unlock a large allowance.
"""

from typing import Optional

from core.config import DEFAULT_SETTINGS, DEFAULT_SLEEP_HOURS, InferenceSettings
from core.logger import get_logger
from core.numeric import round_half_up
from schemas.bio_schema import CarbLimitBreakdown
from services.workout_classifier import get_workout_multiplier

logger = get_logger("services.carb_limiter")

STEPS_BONUS_FLOOR = 6000
GRAMS_PER_1000_STEPS = 5.0
KCAL_PER_WORKOUT_GRAM = 20.0
WORKOUT_BONUS_CAP_OVERRIDE = 5.0


def steps_bonus(steps: int) -> float:
    """5g for every 1000 steps above 6000."""
    if steps > STEPS_BONUS_FLOOR:
        return (steps - STEPS_BONUS_FLOOR) / 1000 * GRAMS_PER_1000_STEPS
    return 0.0


def workout_bonus(active_kcal: float, category: Optional[str]) -> float:
    """Active energy over 20, scaled by the last workout's multiplier."""
    return max(0.0, active_kcal) / KCAL_PER_WORKOUT_GRAM * get_workout_multiplier(category)


def sleep_factor(sleep_hours: Optional[float]) -> float:
    """1.0 from 7h, 0.9 from 6h, 0.75 below; unknown sleep counts as 7.5h."""
    hours = DEFAULT_SLEEP_HOURS if sleep_hours is None else sleep_hours
    if hours >= 7:
        return 1.0
    if hours >= 6:
        return 0.9
    return 0.75


def explain_carb_limit(
    base_target: float,
    steps_bonus: float,
    workout_bonus: float,
    sleep_factor: float,
    symptom_factor: float,
    explicit_override: Optional[float] = None,
    settings: InferenceSettings = DEFAULT_SETTINGS,
) -> CarbLimitBreakdown:
    """Compute the carb ceiling and every intermediate value behind it."""
    total = base_target + steps_bonus + workout_bonus
    cap_applied = False
    if workout_bonus <= WORKOUT_BONUS_CAP_OVERRIDE and total > settings.carb_safety_cap_grams:
        total = settings.carb_safety_cap_grams
        cap_applied = True

    unrounded = total * sleep_factor * symptom_factor
    if explicit_override is not None:
        limit = int(round_half_up(explicit_override))
    else:
        limit = int(round_half_up(max(0.0, unrounded)))

    return CarbLimitBreakdown(
        base_target=base_target,
        steps_bonus=steps_bonus,
        workout_bonus=workout_bonus,
        sleep_factor=sleep_factor,
        symptom_factor=symptom_factor,
        pre_penalty_total=total,
        safety_cap_applied=cap_applied,
        unrounded_limit=unrounded,
        limit_grams=limit,
        override_applied=explicit_override is not None,
    )


def compute_carb_limit(
    base_target: float,
    steps_bonus: float,
    workout_bonus: float,
    sleep_factor: float,
    symptom_factor: float,
    explicit_override: Optional[float] = None,
    settings: InferenceSettings = DEFAULT_SETTINGS,
) -> int:
    """Return the day's carbohydrate ceiling in grams.

    Args:
        base_target: Protocol baseline in grams.
        steps_bonus: Output of :func:`steps_bonus`.
        workout_bonus: Output of :func:`workout_bonus`.
        sleep_factor: Output of :func:`sleep_factor`.
        symptom_factor: 1.0, or the active symptom's factor.
        explicit_override: A caller-supplied limit that wins outright.
        settings: Supplies the safety cap.
    """
    breakdown = explain_carb_limit(
        base_target, steps_bonus, workout_bonus, sleep_factor, symptom_factor, explicit_override, settings
    )
    logger.debug("Carb limit: %s", breakdown)
    return breakdown.limit_grams
