"""Monthly pattern engine for the calendar insights view.

Batch version of the correlation analyzer scoped to one calendar month.
Every (event type, event name, symptom name) link is counted by the number
of distinct calendar days the symptom was logged on, so several entries on
the same day count once. One day is a coincidence and is dropped; two days
make a Clue, three or more make Evidence.
"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from core.config import DEFAULT_SETTINGS, InferenceSettings
from core.logger import get_logger
from core.repository import AppendOnlyRepository
from database import models
from schemas.insight_schema import MonthlyPattern
from services.correlation_analyzer import events_in_window
from services.event_store import decode_value

logger = get_logger("services.pattern_engine")


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """Return `[start, end)` datetimes covering the calendar month."""
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def extract_ingredients(event: models.Event) -> Optional[List[str]]:
    """Return the string ingredients of a FOOD payload, or None.

    Non-FOOD events, text payloads and malformed JSON all yield None.
    """
    if event.type != "FOOD":
        return None
    payload = decode_value(event.value_kind, event.value)
    if payload is None or payload.kind != "structured" or not isinstance(payload.value, dict):
        return None
    raw = payload.value.get("ingredients")
    if not isinstance(raw, list):
        return None
    ingredients = [i for i in raw if isinstance(i, str)]
    return ingredients or None


class _Group:
    __slots__ = ("event_name", "event_type", "symptom_name", "dates", "ingredients")

    def __init__(self, event_name: str, event_type: str, symptom_name: str):
        self.event_name = event_name
        self.event_type = event_type
        self.symptom_name = symptom_name
        self.dates = set()
        self.ingredients: Optional[List[str]] = None


class MonthlyPatternEngine:
    """Classifies recurring event -> symptom links for a month."""

    def __init__(self, settings: InferenceSettings = DEFAULT_SETTINGS):
        self.settings = settings

    def tier_for(self, count: int) -> Optional[str]:
        if count >= self.settings.pattern_evidence_count:
            return "Evidence"
        if count >= self.settings.pattern_clue_count:
            return "Clue"
        return None

    def _analyze(self, session: Session, year: int, month: int) -> List[MonthlyPattern]:
        start, end = month_bounds(year, month)
        window = timedelta(hours=self.settings.correlation_window_hours)
        episodes = AppendOnlyRepository(models.Symptom, session).where(
            models.Symptom.timestamp >= start, models.Symptom.timestamp < end
        )

        groups: Dict[Tuple[str, str, str], _Group] = {}
        for episode in episodes:
            episode_day: date = episode.timestamp.date()
            for ev in events_in_window(session, episode, window):
                key = (ev.type, ev.name, episode.name)
                group = groups.get(key)
                if group is None:
                    group = groups[key] = _Group(ev.name, ev.type, episode.name)
                group.dates.add(episode_day)
                if group.ingredients is None:
                    group.ingredients = extract_ingredients(ev)

        patterns = []
        for group in groups.values():
            count = len(group.dates)
            tier = self.tier_for(count)
            if tier is None:
                continue
            patterns.append(MonthlyPattern(
                event_name=group.event_name,
                event_type=group.event_type,
                symptom_name=group.symptom_name,
                count=count,
                symptom_dates=sorted(group.dates),
                tier=tier,
                ingredients=group.ingredients,
            ))
        patterns.sort(key=lambda p: (-p.count, p.symptom_name, p.event_name))
        logger.info("Monthly patterns %04d-%02d: %s episodes, %s patterns", year, month, len(episodes), len(patterns))
        return patterns

    def get_monthly_patterns(self, store, year: int, month: int) -> List[MonthlyPattern]:
        """Return Clue/Evidence patterns for the month, most recurrent first.

        Args:
            store: Event store exposing `read(fn, default)`.
            year: Calendar year.
            month: Calendar month, 1-12.
        """
        return store.read(lambda session: self._analyze(session, year, month), default=[])


pattern_engine = MonthlyPatternEngine()
