"""Database package: ORM models, engine and schema helpers."""

from .database import (
    make_engine,
    make_session_factory,
    init_db,
)
from . import models

__all__ = [
    "make_engine",
    "make_session_factory",
    "init_db",
    "models",
]
