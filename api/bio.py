"""Bio API router.

Stateless endpoints over the scoring functions. Each takes a fully formed
snapshot or request body and returns the computed shape, nothing is stored.
"""

from fastapi import APIRouter, Depends

from core.config import InferenceSettings
from core.logger import get_logger
from database.deps import get_settings
from schemas.bio_schema import (
    AdaptiveTargets,
    BaselineResponse,
    CarbLimitBreakdown,
    CarbLimitRequest,
    CompositeScores,
    DailyBioSnapshot,
    DailyCorrelation,
    DailyInsightsRequest,
    KetoneEstimate,
    KetoneRequest,
    ProfileSnapshot,
    ProteinRequest,
    ProteinTarget,
    TargetsRequest,
)
from services import carb_limiter
from services.adaptive_targets import compute_adaptive_targets
from services.bio_scorer import compute_scores
from services.daily_insights import calculate_daily_correlations
from services.ketone_estimator import estimate_ketones
from services.nutrition_calculator import nutrition_calculator
from services.protein_optimizer import compute_protein_target

logger = get_logger("api.bio")
router = APIRouter(prefix="/api/bio", tags=["bio"])


@router.post("/targets", response_model=AdaptiveTargets)
def get_targets(payload: TargetsRequest, settings: InferenceSettings = Depends(get_settings)):
    """Compute every adaptive target for the snapshot's day."""
    return compute_adaptive_targets(payload.snapshot, payload.profile, settings)


@router.post("/scores", response_model=CompositeScores)
def get_scores(snapshot: DailyBioSnapshot):
    """Readiness, CNS battery, glycogen and hydration plus the coach message."""
    return compute_scores(
        snapshot.sleep_hours,
        snapshot.heart_rate_variability_ms,
        snapshot.active_energy_kcal,
        snapshot.today_carbs_grams,
        snapshot.steps,
        snapshot.ambient_temp_c,
        weather_loading=snapshot.weather_loading,
    )


@router.post("/carb-limit", response_model=CarbLimitBreakdown)
def get_carb_limit(payload: CarbLimitRequest, settings: InferenceSettings = Depends(get_settings)):
    """Return the carb ceiling with the bonuses and factors behind it."""
    return carb_limiter.explain_carb_limit(
        base_target=payload.base_target,
        steps_bonus=carb_limiter.steps_bonus(payload.steps),
        workout_bonus=carb_limiter.workout_bonus(payload.active_kcal, payload.last_workout_category),
        sleep_factor=carb_limiter.sleep_factor(payload.sleep_hours),
        symptom_factor=payload.symptom_factor,
        explicit_override=payload.explicit_override,
        settings=settings,
    )


@router.post("/protein", response_model=ProteinTarget)
def get_protein(payload: ProteinRequest):
    return compute_protein_target(
        payload.body_weight_kg, payload.last_workout_category, payload.active_kcal, payload.base_target
    )


@router.post("/ketones", response_model=KetoneEstimate)
def get_ketones(payload: KetoneRequest):
    value = estimate_ketones(
        payload.logs,
        payload.net_carbs_today,
        payload.steps,
        yesterday_carbs=payload.yesterday_carbs,
        last_meal_from_yesterday=payload.last_meal_from_yesterday,
        now=payload.now,
    )
    return KetoneEstimate(estimated_ketone_mmol_l=value)


@router.post("/daily-insights", response_model=DailyCorrelation)
def get_daily_insights(payload: DailyInsightsRequest):
    """Compare today with yesterday: causality hints, fatigue alert, metabolic window."""
    return calculate_daily_correlations(payload.today, payload.yesterday)


@router.post("/baseline", response_model=BaselineResponse)
def get_baseline(profile: ProfileSnapshot):
    """BMI and sedentary BMR for the profile; null where inputs are missing."""
    bmi, bmr = nutrition_calculator.baseline(profile.body_weight_kg, profile.height_cm, profile.age_years, profile.is_male)
    logger.debug("Baseline: bmi=%s bmr=%s", bmi, bmr)
    return BaselineResponse(bmi=bmi, bmr_kcal=bmr)
