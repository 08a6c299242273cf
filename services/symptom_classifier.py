"""Symptom-driven carbohydrate penalty.

Logging a symptom sets a factor that lowers the day's carb ceiling: gut
complaints halve it, fatigue and cognitive complaints cut it by 30%, anything
else by 20%. The factor only applies on the calendar day it was set.
"""

from datetime import date
from typing import Optional, Tuple

from core.logger import get_logger
from core.numeric import clamp
from schemas.event_schema import SymptomFactorRecord

logger = get_logger("services.symptom_classifier")

GUT_FACTOR = 0.5
FATIGUE_FACTOR = 0.7
DEFAULT_FACTOR = 0.8
MIN_FACTOR = 0.5
MAX_FACTOR = 1.0

GUT_KEYWORDS = ("bloating", "stomach", "reflux", "gut", "gonfiore", "stomaco", "reflusso")
FATIGUE_KEYWORDS = ("fatigue", "tired", "brain fog", "stanchezza", "stanco")


def classify_symptom(name: str) -> Tuple[float, str]:
    """Return the carb factor and the status message for a symptom name."""
    lowered = (name or "").lower()
    if any(k in lowered for k in GUT_KEYWORDS):
        return GUT_FACTOR, "GUT REST MODE: CARBS -50%"
    if any(k in lowered for k in FATIGUE_KEYWORDS):
        return FATIGUE_FACTOR, "FOCUS MODE: CARBS -30%"
    return DEFAULT_FACTOR, "MILD ADAPTATION"


def normalize_factor(factor: Optional[float]) -> float:
    """Bound a severity factor into [0.5, 1.0]; missing means no penalty."""
    if factor is None:
        return MAX_FACTOR
    return clamp(factor, MIN_FACTOR, MAX_FACTOR)


def record_symptom_factor(name: str, day: date) -> SymptomFactorRecord:
    """Build the record the profile store keeps for the rest of `day`."""
    factor, message = classify_symptom(name)
    logger.info("Symptom factor for %s: %s (%s)", name, factor, message)
    return SymptomFactorRecord(name=name, factor=factor, message=message, date=day)


def active_symptom_factor(record: Optional[SymptomFactorRecord], today: date) -> float:
    """Return the record's factor if it was set today, otherwise 1.0."""
    if record is None or record.date != today:
        return MAX_FACTOR
    return normalize_factor(record.factor)
