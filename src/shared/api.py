"""FastAPI wiring shared by the domain routers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from shared.exceptions import Conflict, Forbidden, InsufficientStock, ServiceUnavailable

_STATUS_CODES = {
    Conflict: 409,
    Forbidden: 403,
    ServiceUnavailable: 503,
    InsufficientStock: 409,
}


def register_error_handlers(app: FastAPI) -> None:
    """Map the error taxonomy onto HTTP status codes.

    Protean's own handlers cover ValidationError (400) and ObjectNotFoundError
    (404); the remaining kinds are registered here.
    """
    register_exception_handlers(app)

    for exc_class, status_code in _STATUS_CODES.items():

        async def _handler(request: Request, exc: Exception, status_code: int = status_code) -> JSONResponse:
            return JSONResponse(status_code=status_code, content={"error": getattr(exc, "messages", str(exc))})

        app.add_exception_handler(exc_class, _handler)
