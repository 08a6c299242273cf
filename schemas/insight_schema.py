"""Schemas for correlation and monthly pattern results."""

from datetime import date
from typing import List, Literal, Optional

from .base import CamelModel


class CorrelationResult(CamelModel):
    """An event that preceded at least half of a symptom's episodes."""

    event_name: str
    event_type: str
    occurrences: int
    symptom_episodes: int
    percentage_of_episodes: int


class MonthlyPattern(CamelModel):
    """A recurring event -> symptom link within one calendar month."""

    event_name: str
    event_type: str
    symptom_name: str
    count: int
    symptom_dates: List[date]
    tier: Literal["Clue", "Evidence"]
    ingredients: Optional[List[str]] = None
