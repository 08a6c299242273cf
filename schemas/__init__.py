"""Pydantic schema package for request and response models."""

from .bio_schema import (
    AdaptiveTargets,
    CarbLimitBreakdown,
    CompositeScores,
    DailyBioSnapshot,
    DailyCorrelation,
    DailyRecord,
    MealLog,
    ProfileSnapshot,
    ProteinTarget,
)
from .event_schema import (
    EventCreateRequest,
    EventLoggedResponse,
    StoredEvent,
    SymptomCreateRequest,
    SymptomFactorRecord,
)
from .insight_schema import CorrelationResult, MonthlyPattern

__all__ = [
    "AdaptiveTargets",
    "CarbLimitBreakdown",
    "CompositeScores",
    "DailyBioSnapshot",
    "DailyCorrelation",
    "DailyRecord",
    "MealLog",
    "ProfileSnapshot",
    "ProteinTarget",
    "EventCreateRequest",
    "EventLoggedResponse",
    "StoredEvent",
    "SymptomCreateRequest",
    "SymptomFactorRecord",
    "CorrelationResult",
    "MonthlyPattern",
]
