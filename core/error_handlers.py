"""Error handlers for the inference API.

Every failure is rendered in the same envelope:
`{"error": {"message", "status_code", "details"?, "request_id"?}}`.
Store outages are not errors here: the services degrade to empty results
before anything reaches these handlers.
"""

from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import AppException
from core.logger import get_logger

logger = get_logger("core.error_handlers")

REQUEST_ID_HEADER = "X-Request-ID"


def _request_id(request: Request) -> Optional[str]:
    return request.headers.get(REQUEST_ID_HEADER)


def create_error_response(
    message: str,
    status_code: int = 500,
    details: Optional[dict] = None,
    request_id: Optional[str] = None,
) -> JSONResponse:
    """Build the error envelope.

    Args:
        message: Human readable error message.
        status_code: HTTP status code.
        details: Optional structured details.
        request_id: Echoed back when the client sent one.
    """
    body = {"error": {"message": message, "status_code": status_code}}
    if details:
        body["error"]["details"] = details
    if request_id:
        body["error"]["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=body)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("%s: %s [%s %s]", type(exc).__name__, exc.message, request.method, request.url.path)
    return create_error_response(exc.message, exc.status_code, exc.details, _request_id(request))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten pydantic errors into `field`/`message`/`type` triples."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning("Invalid payload on %s %s: %s", request.method, request.url.path, errors)
    return create_error_response(
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {"validation_errors": errors},
        _request_id(request),
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Event store error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    # internal database errors are not exposed to clients
    return create_error_response(
        "An event store error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"type": "database_error"},
        _request_id(request),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return create_error_response(
        "An internal server error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"type": "internal_error"},
        _request_id(request),
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Exception handlers registered")
