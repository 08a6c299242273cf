"""Event log API router.

Appends events and symptom episodes. A store failure never turns into an
HTTP error: the response carries id 0 and `persisted: false`.
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from core.logger import get_logger
from database.deps import get_event_store
from schemas.event_schema import (
    EventCreateRequest,
    EventLoggedResponse,
    SymptomCreateRequest,
    SymptomLoggedResponse,
)
from services.symptom_classifier import record_symptom_factor

logger = get_logger("api.events")
router = APIRouter(prefix="/api", tags=["events"])


@router.post("/events", response_model=EventLoggedResponse, status_code=201)
def log_event(payload: EventCreateRequest, store=Depends(get_event_store)):
    """Append a FOOD, WORKOUT, WEATHER or SLEEP event.

    Args:
        payload: `EventCreateRequest` with type, name, value and optional timestamp.
        store: Event store injected by dependency.
    """
    event_id = store.log_event(payload.type, payload.name, payload.value, timestamp=payload.timestamp)
    logger.info("Event %s %s -> id=%s", payload.type, payload.name, event_id)
    return EventLoggedResponse(id=event_id, persisted=event_id > 0)


@router.post("/symptoms", response_model=SymptomLoggedResponse, status_code=201)
def log_symptom(payload: SymptomCreateRequest, store=Depends(get_event_store)):
    """Record a symptom episode and return the day's carb factor record.

    The factor record is meant for the profile store; it applies until the
    end of the day the symptom was logged.
    """
    episode_id = store.log_symptom(payload.name, payload.intensity, timestamp=payload.timestamp)
    day = (payload.timestamp or datetime.now()).date()
    factor = record_symptom_factor(payload.name, day)
    logger.info("Symptom %s -> id=%s factor=%s", payload.name, episode_id, factor.factor)
    return SymptomLoggedResponse(id=episode_id, persisted=episode_id > 0, symptom_factor=factor)
