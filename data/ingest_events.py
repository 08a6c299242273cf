"""Backfill the event store from a CSV export.

This module provides:
- parse_events_csv(csv_path): returns a list of normalized row dicts
- backfill_from_csv(csv_path, store): idempotently appends the rows

Expected columns: `type`, `name`, `value`, `timestamp`. `type` is one of
FOOD, WORKOUT, WEATHER, SLEEP, or SYMPTOM for symptom episodes, whose `value`
is the intensity. A `value` cell holding a JSON object or list is stored as a
structured payload; anything else is kept as text.
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List
import json
import math

import pandas as pd

from core.logger import get_logger
from database import models
from database.models import EVENT_TYPES

logger = get_logger("data.ingest_events")

SYMPTOM_TYPE = "SYMPTOM"


def _is_blank(val) -> bool:
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    return str(val).strip() == ""


def _parse_value(val):
    """Return a dict/list for JSON cells, the stripped string otherwise."""
    if _is_blank(val):
        return ""
    raw = str(val).strip()
    if raw[:1] in ("{", "["):
        try:
            return json.loads(raw)
        except ValueError:
            logger.debug("Cell looks like JSON but does not parse, keeping text: %r", raw[:80])
    return raw


def _parse_intensity(val) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return 5.0


def parse_events_csv(csv_path: str) -> List[Dict]:
    """Parse the CSV and return a list of normalized row dictionaries.

    Rows with an unknown type, no name or an unparseable timestamp are skipped.

    Args:
        csv_path: Path to the events CSV file.

    Returns:
        List of dicts with keys: type, name, value, timestamp (naive UTC datetime).
    """
    logger.info("Parsing events CSV: %s", csv_path)
    df = pd.read_csv(csv_path, encoding="utf-8", dtype=str, keep_default_na=False)
    df = df.rename(columns=lambda s: s.strip().lower())

    rows = []
    for _, row in df.iterrows():
        type_ = str(row.get("type", "")).strip().upper()
        name = str(row.get("name", "")).strip()
        if type_ not in EVENT_TYPES and type_ != SYMPTOM_TYPE:
            logger.debug("Skipping row with unknown type %r", type_)
            continue
        if not name:
            continue
        ts = pd.to_datetime(row.get("timestamp"), errors="coerce", utc=True)
        if pd.isna(ts):
            logger.debug("Skipping %s %s: bad timestamp %r", type_, name, row.get("timestamp"))
            continue
        timestamp: datetime = ts.tz_convert(None).to_pydatetime()

        if type_ == SYMPTOM_TYPE:
            value = _parse_intensity(row.get("value"))
        else:
            value = _parse_value(row.get("value"))
        rows.append({"type": type_, "name": name, "value": value, "timestamp": timestamp})

    logger.info("Parsed %s rows from CSV", len(rows))
    return rows


def _existing_keys(store) -> set:
    def load(session):
        keys = {("SYMPTOM", s.name, s.timestamp) for s in session.query(models.Symptom).all()}
        keys.update((e.type, e.name, e.timestamp) for e in session.query(models.Event).all())
        return keys

    return store.read(load, default=set())


def backfill_from_csv(csv_path: str, store) -> int:
    """Append CSV rows that are not already stored.

    A row is a duplicate when an entry with the same type, name and
    timestamp exists, so running the import twice adds nothing.

    Args:
        csv_path: Path to the events CSV file.
        store: Event store to write to.

    Returns:
        Number of rows actually persisted.
    """
    existing = _existing_keys(store)
    added = 0
    for item in parse_events_csv(csv_path):
        key = (item["type"], item["name"], item["timestamp"])
        if key in existing:
            continue
        if item["type"] == SYMPTOM_TYPE:
            new_id = store.log_symptom(item["name"], item["value"], timestamp=item["timestamp"])
        else:
            new_id = store.log_event(item["type"], item["name"], item["value"], timestamp=item["timestamp"])
        if new_id:
            existing.add(key)
            added += 1
    logger.info("Backfilled %s new rows into the event store", added)
    return added


if __name__ == "__main__":
    import argparse

    from services.event_store import build_event_store

    p = argparse.ArgumentParser("Backfill events and symptoms from CSV into the event store")
    p.add_argument("csv_path")
    args = p.parse_args()
    count = backfill_from_csv(args.csv_path, build_event_store())
    print(f"Done: {count} rows added")
