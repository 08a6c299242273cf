"""Application entry point for the Bio-Metabolic Inference API.

Defines the FastAPI app, middleware, exception handlers and includes the
routers from the `api` package. The `lifespan` handler attaches the event
store and the inference settings to `app.state`; the database itself is
opened lazily on first use.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.bio import router as bio_router
from api.events import router as events_router
from api.insights import router as insights_router
from core.config import load_settings
from core.error_handlers import register_exception_handlers
from core.logger import get_logger
from services.event_store import build_event_store

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Attach the store and settings unless a caller (e.g. a test) already did."""
    if not hasattr(app.state, "settings"):
        app.state.settings = load_settings()
    if not hasattr(app.state, "event_store"):
        app.state.event_store = build_event_store()
    logger.info("Inference API ready (settings=%s)", app.state.settings)
    yield


app = FastAPI(title="Bio-Metabolic Inference API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests and their responses."""
    logger.info("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Request error: %s %s", request.method, request.url.path)
        raise
    logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response


@app.get("/health")
def health(request: Request):
    """Report liveness and whether events are currently being persisted.

    An unavailable store is not an outage: the engine keeps computing
    targets, it just stops recording history.
    """
    store = request.app.state.event_store
    return {"status": "healthy", "eventStore": "available" if store.available else "unavailable"}


app.include_router(events_router)
app.include_router(insights_router)
app.include_router(bio_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
