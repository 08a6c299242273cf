"""Append-only event and symptom log.

`SqlEventStore` opens its database lazily: the engine and schema are created
on the first call. If that first initialization fails the instance marks
itself unavailable and every later call returns `0` or the caller's default
without touching the database again. `NullEventStore` offers the same
interface with persistence switched off.

Callers must read a `0` id or an empty result as "possibly not persisted",
never as "definitely empty".
"""

import json
import math
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.config import READ_DATABASE_URL, WRITE_DATABASE_URL, event_store_disabled
from core.exceptions import StorageUnavailableError
from core.logger import get_logger
from core.repository import AppendOnlyRepository
from database import models
from database.database import init_db, make_engine, make_session_factory
from schemas.event_schema import StoredEvent, StructuredValue, TextValue

logger = get_logger("services.event_store")

R = TypeVar("R")

RawValue = Union[str, int, float, dict, list, TextValue, StructuredValue, None]


def encode_value(value: RawValue):
    """Turn a payload into a `(kind, text)` pair for the `events.value` column.

    Strings pass through, numbers and bools are stringified, dicts and lists
    are JSON.
    """
    if isinstance(value, (TextValue, StructuredValue)):
        return encode_value(value.value)
    if value is None:
        return "text", ""
    if isinstance(value, str):
        return "text", value
    if isinstance(value, bool):
        return "text", "true" if value else "false"
    if isinstance(value, (int, float)):
        return "text", str(value)
    return "structured", json.dumps(value)


def decode_value(kind: str, raw: Optional[str]):
    """Rebuild the tagged payload of a stored row.

    A structured payload that no longer parses is dropped (None) instead of
    failing the read.
    """
    if raw is None:
        return None
    if kind == "structured":
        try:
            return StructuredValue(value=json.loads(raw))
        except ValueError:
            logger.debug("Unparseable structured payload ignored: %r", raw[:80])
            return None
    return TextValue(value=raw)


def clamp_intensity(intensity: float) -> int:
    """Round half-up and bound an intensity into [1, 10]."""
    return max(1, min(10, int(math.floor(intensity + 0.5))))


def _as_utc_naive(ts: Optional[datetime]) -> datetime:
    if ts is None:
        return datetime.utcnow()
    if ts.tzinfo is not None:
        return ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def to_stored_event(row: models.Event) -> StoredEvent:
    return StoredEvent(
        id=row.id,
        type=row.type,
        name=row.name,
        value=decode_value(row.value_kind, row.value),
        timestamp=row.timestamp,
    )


class SqlEventStore:
    """Event store backed by SQLAlchemy with lazy, fail-once initialization.

    Parameters
    ----------
    write_url: str
        Database URL used for inserts.
    read_url: str, optional
        Database URL used by analyzers; defaults to `write_url`.
    """

    def __init__(self, write_url: str = WRITE_DATABASE_URL, read_url: Optional[str] = None):
        self.write_url = write_url
        self.read_url = read_url or write_url
        self._write_factory: Optional[sessionmaker] = None
        self._read_factory: Optional[sessionmaker] = None
        self._unavailable = False

    @property
    def available(self) -> bool:
        """False once initialization has failed; never flips back."""
        if self._unavailable:
            return False
        try:
            self._ensure_ready()
        except StorageUnavailableError:
            return False
        return True

    def _ensure_ready(self) -> None:
        if self._unavailable:
            raise StorageUnavailableError(reason="initialization failed earlier")
        if self._write_factory is not None:
            return
        try:
            write_engine = make_engine(self.write_url)
            init_db(write_engine)
            if self.read_url == self.write_url:
                read_engine = write_engine
            else:
                read_engine = make_engine(self.read_url)
        except (SQLAlchemyError, OSError, ImportError) as exc:
            self._unavailable = True
            logger.warning("Event store unavailable, persistence disabled: %s", exc)
            raise StorageUnavailableError(reason=str(exc))
        self._write_factory = make_session_factory(write_engine)
        self._read_factory = make_session_factory(read_engine)
        logger.info("Event store ready at %s", self.write_url)

    def _write(self, fn: Callable[[Session], int]) -> int:
        try:
            self._ensure_ready()
        except StorageUnavailableError:
            return 0
        session = self._write_factory()
        try:
            return fn(session)
        except SQLAlchemyError:
            session.rollback()
            logger.warning("Event store write failed", exc_info=True)
            return 0
        finally:
            session.close()

    def log_event(self, type: str, name: str, value: RawValue = "", timestamp: Optional[datetime] = None) -> int:
        """Append an event and return its id, or 0 if it was not stored.

        Args:
            type: One of FOOD, WORKOUT, WEATHER, SLEEP.
            name: Event name, e.g. 'Prosecco' or 'Running'.
            value: Amount, intensity or details (text, number or JSON record).
            timestamp: Optional backdated time; defaults to now (UTC).
        """
        kind, text = encode_value(value)

        def insert(session: Session) -> int:
            row = models.Event(type=type, name=name, value=text, value_kind=kind, timestamp=_as_utc_naive(timestamp))
            row = AppendOnlyRepository(models.Event, session).append(row)
            logger.debug("Event logged: id=%s type=%s name=%s", row.id, type, name)
            return row.id

        return self._write(insert)

    def log_symptom(self, name: str, intensity: float, timestamp: Optional[datetime] = None) -> int:
        """Append a symptom episode with intensity clamped to 1-10.

        Returns:
            The new episode id, or 0 if it was not stored.
        """
        clamped = clamp_intensity(intensity)

        def insert(session: Session) -> int:
            row = models.Symptom(name=name, intensity=clamped, timestamp=_as_utc_naive(timestamp))
            row = AppendOnlyRepository(models.Symptom, session).append(row)
            logger.debug("Symptom logged: id=%s name=%s intensity=%s", row.id, name, clamped)
            return row.id

        return self._write(insert)

    def read(self, fn: Callable[[Session], R], default: R) -> R:
        """Run a read-only callable against a fresh session.

        Returns `default` when the store is unavailable or the query fails.
        """
        try:
            self._ensure_ready()
        except StorageUnavailableError:
            return default
        session = self._read_factory()
        try:
            return fn(session)
        except SQLAlchemyError:
            logger.warning("Event store read failed", exc_info=True)
            return default
        finally:
            session.close()


class NullEventStore:
    """No-op store: writes return 0, reads return the caller's default."""

    available = False

    def log_event(self, type: str, name: str, value: Any = "", timestamp: Optional[datetime] = None) -> int:
        return 0

    def log_symptom(self, name: str, intensity: float, timestamp: Optional[datetime] = None) -> int:
        return 0

    def read(self, fn: Callable[[Session], R], default: R) -> R:
        return default


def build_event_store():
    """Return the store configured by the environment."""
    if event_store_disabled():
        logger.info("Event store disabled by configuration")
        return NullEventStore()
    return SqlEventStore(WRITE_DATABASE_URL, READ_DATABASE_URL)
