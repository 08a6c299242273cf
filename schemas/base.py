"""Shared Pydantic base model.

Python code uses snake_case attributes; the wire format is camelCase so
the UI receives the same field names it has always rendered.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(BaseModel):
    """Immutable, hashable variant used for snapshots that feed memoized functions."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
