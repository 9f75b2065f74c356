"""
Domain error taxonomy and the single place that turns it into HTTP responses.

Services raise these; routers never build error responses themselves.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FieldServiceError(Exception):
    """Base class for errors that map onto an HTTP status"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(FieldServiceError):
    status_code = 401
    default_message = "Unauthorized"


class PermissionDeniedError(FieldServiceError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(FieldServiceError):
    status_code = 404
    default_message = "Not found"


class ValidationError(FieldServiceError):
    status_code = 400
    default_message = "Validation error"


class ConflictError(FieldServiceError):
    status_code = 400
    default_message = "Conflict"


class InvalidStateError(FieldServiceError):
    status_code = 400
    default_message = "Invalid state"


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that produce the {"error": ...} envelope"""

    @app.exception_handler(FieldServiceError)
    async def field_service_error_handler(request: Request, exc: FieldServiceError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"ℹ️ {request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code, content={"error": exc.message}, headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Convert validation errors on the Authorization header to 401 and
        everything else to a 400 envelope
        """
        for error in exc.errors():
            if error.get("loc") and "authorization" in str(error.get("loc")).lower():
                logger.warning(
                    f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
                )
                return error_response(401, "Unauthorized")

        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        details = [
            {"loc": list(error.get("loc", [])), "msg": error.get("msg")} for error in exc.errors()
        ]
        return error_response(400, "Validation error", details=details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"❌ {request.method} {request.url.path} - Error: {exc}")
        logger.exception(exc)
        return error_response(500, "Internal server error")
