"""Schemas for logging events and symptom episodes."""

from datetime import date as date_type, datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .base import CamelModel

EventType = Literal["FOOD", "WORKOUT", "WEATHER", "SLEEP"]


class TextValue(CamelModel):
    """Plain payload: a label, an amount or a stringified number."""

    kind: Literal["text"] = "text"
    value: str


class StructuredValue(CamelModel):
    """JSON payload, e.g. a meal with an `ingredients` list."""

    kind: Literal["structured"] = "structured"
    value: Union[Dict[str, Any], List[Any]]


EventValue = Annotated[Union[TextValue, StructuredValue], Field(discriminator="kind")]


class EventCreateRequest(CamelModel):
    """Payload for appending an event to the log."""

    type: EventType = Field(..., examples=["FOOD"], description="FOOD, WORKOUT, WEATHER or SLEEP")
    name: str = Field(..., min_length=1, examples=["Pizza"], description="Event name")
    value: Union[str, float, int, Dict[str, Any], List[Any]] = Field(
        "",
        examples=[{"grams": 250, "ingredients": ["flour", "tomato", "mozzarella"]}],
        description="Free text, a number or a JSON record",
    )
    timestamp: Optional[datetime] = Field(None, description="Backdated time; defaults to now (UTC)")


class EventLoggedResponse(CamelModel):
    """Id of the stored row; 0 means the event was possibly not persisted."""

    id: int
    persisted: bool


class SymptomCreateRequest(CamelModel):
    """Payload for reporting a symptom episode."""

    name: str = Field(..., min_length=1, examples=["Bloating"], description="Symptom name")
    intensity: float = Field(5, examples=[6], description="Intensity, clamped to 1-10")
    timestamp: Optional[datetime] = Field(None, description="Backdated time; defaults to now (UTC)")


class SymptomFactorRecord(CamelModel):
    """Carb penalty the profile store keeps for the day a symptom was logged."""

    name: str
    factor: float
    message: str
    date: date_type


class SymptomLoggedResponse(CamelModel):
    """Stored episode id plus the factor record to persist in the profile store."""

    id: int
    persisted: bool
    symptom_factor: SymptomFactorRecord


class StoredEvent(CamelModel):
    """An event row read back from the store with its decoded payload."""

    id: int
    type: str
    name: str
    value: Optional[EventValue] = None
    timestamp: datetime
