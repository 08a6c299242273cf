"""Insights API router.

Read-only views over the event log: per-symptom correlations and the
monthly Clue/Evidence patterns shown in the calendar.
"""

from typing import List

from fastapi import APIRouter, Depends

from core.config import InferenceSettings
from core.exceptions import ValidationError
from core.logger import get_logger
from database.deps import get_event_store, get_settings
from schemas.insight_schema import CorrelationResult, MonthlyPattern
from services.correlation_analyzer import CorrelationAnalyzer
from services.pattern_engine import MonthlyPatternEngine

logger = get_logger("api.insights")
router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.get("/correlations/{symptom_name}", response_model=List[CorrelationResult])
def get_correlations(symptom_name: str, store=Depends(get_event_store), settings: InferenceSettings = Depends(get_settings)):
    """Return events that preceded at least half of the symptom's episodes.

    An empty list means either no data or an unavailable store.
    """
    return CorrelationAnalyzer(settings).find_correlations(store, symptom_name)


@router.get(
    "/monthly/{year}/{month}",
    response_model=List[MonthlyPattern],
    response_model_exclude_none=True,
)
def get_monthly_patterns(year: int, month: int, store=Depends(get_event_store), settings: InferenceSettings = Depends(get_settings)):
    """Return recurring event -> symptom links for the calendar month.

    Raises:
        ValidationError: If month is outside 1-12 or year is out of range.
    """
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12", field="month")
    if not 1 <= year <= 9998:
        raise ValidationError("year out of range", field="year")
    return MonthlyPatternEngine(settings).get_monthly_patterns(store, year, month)
