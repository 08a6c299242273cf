"""SQLAlchemy ORM models for the event store.

Two append-only tables: `events` (food, workout, weather and sleep entries)
and `symptoms` (self-reported episodes). Models stay behavior-free; payload
encoding lives in `services.event_store`.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Index
from sqlalchemy.orm import declarative_base
from datetime import datetime

Base = declarative_base()

EVENT_TYPES = ("FOOD", "WORKOUT", "WEATHER", "SLEEP")


class Event(Base):
    """ORM model for a timestamped, named occurrence.

    `value` holds the encoded payload and `value_kind` tells how to decode it
    ('text' or 'structured').
    """

    __tablename__ = "events"
    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String, nullable=False)
    name = Column(String, nullable=False)
    value = Column(Text, nullable=True)
    value_kind = Column(String, nullable=False, default="text")
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_events_timestamp", "timestamp"),
        Index("idx_events_type", "type"),
    )


class Symptom(Base):
    """ORM model for a symptom episode with intensity 1-10."""

    __tablename__ = "symptoms"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    intensity = Column(Integer, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_symptoms_timestamp", "timestamp"),
        Index("idx_symptoms_name", "name"),
    )
