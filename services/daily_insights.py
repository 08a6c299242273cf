"""Day-over-day insights for the black-box history view.

Compares today's record with yesterday's: possible causes of today's
symptoms, a fatigue alert, and the metabolic window between the last meal
and sleep.
"""

from datetime import datetime
from typing import Optional

from core.logger import get_logger
from core.numeric import round_half_up
from schemas.bio_schema import DailyCorrelation, DailyRecord

logger = get_logger("services.daily_insights")

SHORT_SLEEP_HOURS = 6.5
LOW_HRV_MS = 40


def _causality(today: DailyRecord, yesterday: Optional[DailyRecord]) -> Optional[str]:
    if not today.symptoms or yesterday is None:
        return None
    hints = []
    if 0 < yesterday.sleep_hours < SHORT_SLEEP_HOURS:
        hints.append(f"short sleep yesterday ({yesterday.sleep_hours:.1f}h)")
    if yesterday.hrv_ms is not None and yesterday.hrv_ms < LOW_HRV_MS:
        hints.append("low HRV yesterday")
    if yesterday.symptoms:
        hints.append("symptoms already present yesterday")
    if not hints:
        return None
    return "Possible link with: " + ", ".join(hints)


def _fatigue_alert(today: DailyRecord, yesterday: Optional[DailyRecord]) -> bool:
    if yesterday is None or today.hrv_ms is None or yesterday.hrv_ms is None:
        return False
    hrv_dropped = today.hrv_ms < yesterday.hrv_ms
    readiness_dropped = today.readiness < yesterday.readiness
    fatigue_higher = today.fatigue_predictor_score > yesterday.fatigue_predictor_score
    return hrv_dropped and (readiness_dropped or fatigue_higher)


def _metabolic_window(today: DailyRecord) -> Optional[float]:
    if not today.meal_times or today.sleep_start_iso is None:
        return None
    parsed = []
    for raw in today.meal_times:
        try:
            parsed.append(datetime.fromisoformat(raw))
        except ValueError:
            logger.debug("Skipping unparseable meal time %r", raw)
    if not parsed:
        return None
    last_meal = max(parsed)
    sleep_start = today.sleep_start_iso
    if (last_meal.tzinfo is None) != (sleep_start.tzinfo is None):
        last_meal = last_meal.replace(tzinfo=sleep_start.tzinfo)
    hours = (sleep_start - last_meal).total_seconds() / 3600
    return round_half_up(hours, 1)


def calculate_daily_correlations(today: DailyRecord, yesterday: Optional[DailyRecord] = None) -> DailyCorrelation:
    """Build the `DailyCorrelation` for `today` given the previous day, if any."""
    return DailyCorrelation(
        causality=_causality(today, yesterday),
        fatigue_alert=_fatigue_alert(today, yesterday),
        metabolic_window_hours=_metabolic_window(today),
    )
