"""Dependency helpers that expose the application's event store and settings.

Both live on `app.state` (set up in the lifespan handler) so tests can swap
in an in-memory or no-op store.
"""

from fastapi import Request

from core.config import DEFAULT_SETTINGS, InferenceSettings


def get_event_store(request: Request):
    """Return the event store attached to the running application."""
    return request.app.state.event_store


def get_settings(request: Request) -> InferenceSettings:
    """Return the inference settings loaded at startup."""
    return getattr(request.app.state, "settings", DEFAULT_SETTINGS)
