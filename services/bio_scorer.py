"""Composite physiological scores and the coach message.

Raw signals become four bounded 0-100 scores: readiness, CNS battery,
glycogen and hydration. Sleep stands in for HRV when the sensor gave nothing.
"""

from typing import Optional

from core.config import DEFAULT_AMBIENT_TEMP_C
from core.numeric import clamp, score
from schemas.bio_schema import CompositeScores

HRV_FLOOR_MS = 20.0
HRV_SPAN_MS = 80.0  # 20ms -> 0%, 100ms -> 100%


def compute_readiness(sleep_hours: float, hrv_ms: Optional[float]) -> int:
    """Half sleep (8h = full), half normalized HRV."""
    sleep_ratio = min(1.0, max(0.0, sleep_hours) / 8)
    if hrv_ms is not None:
        hrv_norm = clamp((hrv_ms - HRV_FLOOR_MS) / HRV_SPAN_MS, 0.0, 1.0)
    else:
        hrv_norm = sleep_ratio
    return score(sleep_ratio * 50 + hrv_norm * 50)


def compute_cns_battery(hrv_ms: Optional[float], sleep_hours: float) -> int:
    """HRV mapped to 0-100; sleep over 8h when HRV is missing."""
    if hrv_ms is not None and hrv_ms > 0:
        return score((hrv_ms - HRV_FLOOR_MS) / HRV_SPAN_MS * 100)
    return score(sleep_hours / 8 * 100)


def compute_glycogen(active_kcal: float, today_carbs: float) -> int:
    """Minus 1% per 15 active kcal, plus 2% per 10g of carbs eaten."""
    return score(100 - active_kcal / 15 + (today_carbs / 10) * 2)


def compute_hydration(ambient_temp_c: float, steps: int) -> int:
    """Heat above 20C and movement both drain the estimate."""
    return score(100 - (ambient_temp_c - 20) * 2 - steps / 2000)


def coach_message(readiness: int, cns_battery: int, ambient_temp_c: float, loading: bool = False) -> str:
    """First matching rule wins."""
    if loading:
        return "Loading data..."
    if ambient_temp_c < 10:
        return "It's cold. Extended warm-up required."
    if readiness < 50:
        return "Battery low. Prioritize recovery."
    if cns_battery < 40:
        return "Nervous system under stress. Active recovery is better today."
    if readiness >= 70 and cns_battery >= 60:
        return "System ready. You can push safely."
    return "Status normal. Keep up hydration and sleep."


def salt_advice(ambient_temp_c: float) -> str:
    if ambient_temp_c > 25:
        return "Intense heat. 1g sodium pre-load recommended."
    if ambient_temp_c < 10:
        return "Cold. Extended warm-up and hydration."
    return "Thermal conditions ok. Standard hydration."


def weather_condition(code: int) -> str:
    """Label for a WMO weather interpretation code."""
    if code == 0:
        return "Clear"
    if code <= 3:
        return "Cloudy"
    if code <= 49:
        return "Fog"
    if code <= 59:
        return "Rain"
    if code <= 69:
        return "Snow"
    if code <= 79:
        return "Showers"
    if code <= 84:
        return "Thunderstorm"
    if code <= 94:
        return "Snow / Thunderstorm"
    return "Variable"


def compute_scores(
    sleep_hours: Optional[float],
    hrv_ms: Optional[float],
    active_kcal: float,
    today_carbs: float,
    steps: int,
    ambient_temp_c: Optional[float] = None,
    weather_loading: bool = False,
) -> CompositeScores:
    """Compute all four scores plus the coach and sodium texts.

    Missing sleep counts as 0h; missing temperature as 20C.
    """
    sleep = sleep_hours or 0.0
    temp = DEFAULT_AMBIENT_TEMP_C if ambient_temp_c is None else ambient_temp_c
    readiness = compute_readiness(sleep, hrv_ms)
    cns = compute_cns_battery(hrv_ms, sleep)
    return CompositeScores(
        readiness=readiness,
        cns_battery=cns,
        glycogen=compute_glycogen(active_kcal, today_carbs),
        hydration=compute_hydration(temp, steps),
        coach_message=coach_message(readiness, cns, temp, weather_loading),
        salt_advice=salt_advice(temp),
    )
