"""Schemas for daily snapshots and the adaptive targets derived from them."""

from datetime import date as date_type, datetime
from typing import Any, List, Literal, Optional, Tuple

from pydantic import Field, model_validator

from .base import CamelModel, FrozenCamelModel

WorkoutCategory = Literal["anaerobic", "aerobic_intense", "low"]


class ActiveSymptom(FrozenCamelModel):
    """A symptom logged today; without an explicit factor the name's class sets it."""

    name: str
    severity_factor: float = Field(..., ge=0, le=1)

    @model_validator(mode="before")
    @classmethod
    def default_factor_from_name(cls, data: Any):
        if isinstance(data, dict) and "severity_factor" not in data and "severityFactor" not in data:
            from services.symptom_classifier import classify_symptom

            factor, _ = classify_symptom(data.get("name", ""))
            data = {**data, "severity_factor": factor}
        return data


class DailyBioSnapshot(FrozenCamelModel):
    """Everything the scoring pipeline needs for one day.

    Built fresh by the caller from the sensor bridge, the meal log and the
    profile store. It is immutable so results can be memoized on it.
    """

    date: date_type
    sleep_hours: Optional[float] = Field(None, ge=0, examples=[7.2])
    steps: int = Field(0, ge=0, examples=[8400])
    active_energy_kcal: float = Field(0, ge=0, examples=[420])
    heart_rate_variability_ms: Optional[float] = Field(None, ge=0, examples=[55])
    last_workout_category: Optional[WorkoutCategory] = None
    today_carbs_grams: float = Field(0, ge=0)
    yesterday_carbs_grams: Optional[float] = Field(None, ge=0)
    ambient_temp_c: float = 20.0
    symptom_active: Optional[ActiveSymptom] = None
    meal_times: Tuple[str, ...] = Field((), description="Today's timed meals as HH:MM")
    yesterday_last_meal_time: Optional[str] = Field(None, examples=["21:30"])
    workout_logged: bool = False
    weather_loading: bool = False
    as_of: Optional[datetime] = Field(None, description="Reference time for the fasting window")


class ProfileSnapshot(FrozenCamelModel):
    """Values supplied by the local profile store."""

    body_weight_kg: float = Field(..., gt=0, examples=[78])
    height_cm: Optional[float] = Field(None, gt=0, examples=[178])
    age_years: Optional[int] = Field(None, gt=0, examples=[34])
    is_male: bool = True
    base_carbs_grams: float = Field(25, ge=0)
    base_protein_grams: float = Field(100, ge=0)
    carb_limit_override_grams: Optional[float] = Field(None, ge=0)


class AdaptiveTargets(FrozenCamelModel):
    """Daily targets. Immutable: memoized instances are shared between callers."""

    dynamic_carb_limit_grams: int
    dynamic_protein_target_grams: int
    readiness_score: int
    cns_battery_score: int
    glycogen_score: int
    hydration_score: int
    estimated_ketone_mmol_l: float


class TargetsRequest(CamelModel):
    snapshot: DailyBioSnapshot
    profile: ProfileSnapshot


class CompositeScores(CamelModel):
    """Four bounded scores plus the coach and sodium advice texts."""

    readiness: int
    cns_battery: int
    glycogen: int
    hydration: int
    coach_message: str
    salt_advice: str


class CarbLimitRequest(CamelModel):
    base_target: float = Field(..., ge=0, examples=[25])
    steps: int = Field(0, ge=0)
    active_kcal: float = Field(0, ge=0)
    last_workout_category: Optional[WorkoutCategory] = None
    sleep_hours: Optional[float] = Field(None, ge=0)
    symptom_factor: float = Field(1.0, ge=0, le=1)
    explicit_override: Optional[float] = Field(None, ge=0)


class CarbLimitBreakdown(CamelModel):
    base_target: float
    steps_bonus: float
    workout_bonus: float
    sleep_factor: float
    symptom_factor: float
    pre_penalty_total: float
    safety_cap_applied: bool
    unrounded_limit: float
    limit_grams: int
    override_applied: bool


class ProteinRequest(CamelModel):
    body_weight_kg: float = Field(..., examples=[78])
    last_workout_category: Optional[WorkoutCategory] = None
    active_kcal: float = 0
    base_target: float = Field(..., examples=[100])


class ProteinTarget(CamelModel):
    target: int
    message: Optional[str] = None


class MealLog(CamelModel):
    """A meal-log row as the ketone estimator sees it."""

    time: Optional[str] = Field(None, examples=["13:15"])
    meal_type: Optional[str] = Field(None, examples=["LUNCH"])
    label: Optional[str] = None


class KetoneRequest(CamelModel):
    logs: List[MealLog] = []
    net_carbs_today: float = 0
    steps: int = 0
    yesterday_carbs: Optional[float] = None
    last_meal_from_yesterday: Optional[str] = Field(None, examples=["21:30"])
    now: Optional[datetime] = None


class KetoneEstimate(CamelModel):
    estimated_ketone_mmol_l: float


class DailyRecord(CamelModel):
    """One day of the black-box log used for day-over-day insights."""

    date: date_type
    sleep_hours: float = 0
    hrv_ms: Optional[float] = None
    readiness: float = 0
    fatigue_predictor_score: float = 0
    symptoms: List[str] = []
    meal_times: List[str] = Field([], description="ISO datetimes of today's meals")
    sleep_start_iso: Optional[datetime] = None


class DailyInsightsRequest(CamelModel):
    today: DailyRecord
    yesterday: Optional[DailyRecord] = None


class DailyCorrelation(CamelModel):
    causality: Optional[str] = None
    fatigue_alert: bool = False
    metabolic_window_hours: Optional[float] = None


class BaselineResponse(CamelModel):
    bmi: Optional[float] = None
    bmr_kcal: Optional[int] = None
