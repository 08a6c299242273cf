"""Adaptive targets pipeline.

Runs the carb limiter, protein optimizer, ketone estimator and scorer over
one daily snapshot. Snapshots and profiles are immutable, so results are
memoized on them; callers invalidate by building a new snapshot.
"""

from datetime import datetime, time
from functools import lru_cache

from core.config import DEFAULT_SETTINGS, InferenceSettings
from core.logger import get_logger
from schemas.bio_schema import AdaptiveTargets, DailyBioSnapshot, ProfileSnapshot
from services import bio_scorer, carb_limiter
from services.ketone_estimator import estimate_ketones
from services.protein_optimizer import compute_protein_target
from services.symptom_classifier import normalize_factor

logger = get_logger("services.adaptive_targets")


def _reference_time(snapshot: DailyBioSnapshot) -> datetime:
    if snapshot.as_of is not None:
        return snapshot.as_of
    return datetime.combine(snapshot.date, time(hour=12))


@lru_cache(maxsize=256)
def compute_adaptive_targets(
    snapshot: DailyBioSnapshot,
    profile: ProfileSnapshot,
    settings: InferenceSettings = DEFAULT_SETTINGS,
) -> AdaptiveTargets:
    """Compute every adaptive target for the day described by `snapshot`."""
    symptom = snapshot.symptom_active
    symptom_factor = normalize_factor(symptom.severity_factor if symptom else None)

    carb_limit = carb_limiter.compute_carb_limit(
        base_target=profile.base_carbs_grams,
        steps_bonus=carb_limiter.steps_bonus(snapshot.steps),
        workout_bonus=carb_limiter.workout_bonus(snapshot.active_energy_kcal, snapshot.last_workout_category),
        sleep_factor=carb_limiter.sleep_factor(snapshot.sleep_hours),
        symptom_factor=symptom_factor,
        explicit_override=profile.carb_limit_override_grams,
        settings=settings,
    )

    protein = compute_protein_target(
        profile.body_weight_kg,
        snapshot.last_workout_category,
        snapshot.active_energy_kcal,
        profile.base_protein_grams,
    )

    logs = [{"time": t} for t in snapshot.meal_times]
    if snapshot.workout_logged:
        logs.append({"meal_type": "WORKOUT"})
    ketones = estimate_ketones(
        logs,
        snapshot.today_carbs_grams,
        snapshot.steps,
        yesterday_carbs=snapshot.yesterday_carbs_grams,
        last_meal_from_yesterday=snapshot.yesterday_last_meal_time,
        now=_reference_time(snapshot),
    )

    scores = bio_scorer.compute_scores(
        snapshot.sleep_hours,
        snapshot.heart_rate_variability_ms,
        snapshot.active_energy_kcal,
        snapshot.today_carbs_grams,
        snapshot.steps,
        snapshot.ambient_temp_c,
    )

    targets = AdaptiveTargets(
        dynamic_carb_limit_grams=carb_limit,
        dynamic_protein_target_grams=protein.target,
        readiness_score=scores.readiness,
        cns_battery_score=scores.cns_battery,
        glycogen_score=scores.glycogen,
        hydration_score=scores.hydration,
        estimated_ketone_mmol_l=ketones,
    )
    logger.info("Adaptive targets for %s: carbs=%sg protein=%sg", snapshot.date, carb_limit, protein.target)
    return targets
