"""Blood ketone estimate (mmol/L) from fasting time, carbs and activity.

A piecewise fasting model: flat below 4h, a slow ramp up to 12h, then a
slope that depends on today's carbs. Steps and a logged workout add a small
bonus. Yesterday's carbohydrate load damps the result, modelling residual
insulin and glycogen suppressing ketogenesis.
"""

import re
from datetime import datetime, timedelta
from typing import Iterable, Optional

from core.logger import get_logger
from core.numeric import clamp, round_half_up

logger = get_logger("services.ketone_estimator")

OUT_OF_KETOSIS = 0.1
MAX_KETONES = 3.5
DEFAULT_HOURS_FASTED = 12.0
WORKOUT_TAGS = ("WORKOUT", "EXERCISE", "ESERCIZIO")

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


def _parse_hhmm(value: Optional[str]):
    if not value:
        return None
    match = _HHMM.match(value.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours, minutes


def _field(log, name: str):
    if isinstance(log, dict):
        return log.get(name)
    return getattr(log, name, None)


def is_workout_log(log) -> bool:
    """True when a log row is tagged as exercise."""
    return _field(log, "meal_type") in WORKOUT_TAGS or _field(log, "label") in WORKOUT_TAGS


def hours_fasted(logs: Iterable, now: datetime, last_meal_from_yesterday: Optional[str] = None) -> float:
    """Hours since the latest timed meal today, else since yesterday's last meal, else 12."""
    times = [t for t in (_parse_hhmm(_field(log, "time")) for log in logs) if t is not None]
    if times:
        h, m = max(times)
        last_meal = now.replace(hour=h, minute=m, second=0, microsecond=0)
        return max(0.0, (now - last_meal).total_seconds() / 3600)
    yesterday = _parse_hhmm(last_meal_from_yesterday)
    if yesterday is not None:
        h, m = yesterday
        last_meal = (now - timedelta(days=1)).replace(hour=h, minute=m, second=0, microsecond=0)
        return max(0.0, (now - last_meal).total_seconds() / 3600)
    return DEFAULT_HOURS_FASTED


def fasting_curve(hours: float, net_carbs_today: float) -> float:
    """Base ketone level for `hours` fasted, before activity and carb memory."""
    if hours < 4:
        return 0.1
    if hours < 12:
        return 0.1 + (hours - 4) / 8 * 0.2
    if net_carbs_today < 10:
        slope = 0.045
    elif net_carbs_today <= 20:
        slope = 0.032
    else:
        slope = 0.02
    return 0.25 + (hours - 12) * slope


def carb_memory(value: float, hours: float, yesterday_carbs: Optional[float]) -> float:
    """Damp `value` by yesterday's carbohydrate intake."""
    if not yesterday_carbs:
        return value
    if yesterday_carbs > 50:
        return min(value, 0.12 + hours * 0.018) * 0.5
    if yesterday_carbs >= 25:
        value *= 0.55
        return min(value, 0.35) if hours < 16 else value
    if yesterday_carbs >= 15:
        value *= 0.75
        return min(value, 0.4) if hours < 14 else value
    return value


def estimate_ketones(
    logs: Iterable,
    net_carbs_today: float,
    steps: int,
    yesterday_carbs: Optional[float] = None,
    last_meal_from_yesterday: Optional[str] = None,
    now: Optional[datetime] = None,
) -> float:
    """Estimate blood ketones in mmol/L, rounded to one decimal.

    Args:
        logs: Today's log rows (dicts or objects) with optional `time` ("HH:MM"),
            `meal_type` and `label`.
        net_carbs_today: Net carbs eaten today in grams.
        steps: Today's step count.
        yesterday_carbs: Yesterday's net carbs, if known.
        last_meal_from_yesterday: Time of yesterday's last meal as "HH:MM".
        now: Reference time; defaults to the current local time.
    """
    if net_carbs_today > 50:
        return OUT_OF_KETOSIS

    logs = list(logs or [])
    now = now or datetime.now()
    hours = hours_fasted(logs, now, last_meal_from_yesterday)

    value = fasting_curve(hours, net_carbs_today)
    if steps > 10000:
        value += 0.08
    elif steps > 5000:
        value += 0.04
    if any(is_workout_log(log) for log in logs):
        value += 0.12

    value = carb_memory(value, hours, yesterday_carbs)
    result = round_half_up(clamp(value, 0.0, MAX_KETONES), 1)
    logger.debug("Ketones: fasted=%.1fh carbs=%s steps=%s -> %s", hours, net_carbs_today, steps, result)
    return result
