"""Error taxonomy and the JSON error envelope.

Every failure leaves the service as ``{"error": "<message>"}`` with a non-2xx
status. Handlers raise the typed errors below; ``register_exception_handlers``
maps them (plus FastAPI's own HTTP and request-validation errors) onto the
envelope so no request ever escapes with a stack trace.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("planpro.errors")


class PlanProError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlanProError):
    status_code = 400


class ExtractionError(PlanProError):
    status_code = 400


class AuthenticationError(PlanProError):
    status_code = 401


class NotFoundError(PlanProError):
    status_code = 404


class GenerationServiceError(PlanProError):
    """Completion service failed or is not configured.

    ``kind`` is ``"configuration"`` when a credential is missing and
    ``"service"`` for upstream failures. Both surface as 500.
    """

    CONFIGURATION = "configuration"
    SERVICE = "service"

    def __init__(self, message: str, kind: str = SERVICE):
        super().__init__(message)
        self.kind = kind

    @property
    def is_configuration_error(self) -> bool:
        return self.kind == self.CONFIGURATION


class MalformedGenerationOutputError(PlanProError):
    USER_MESSAGE = "The AI returned an invalid response. Please try again."

    def __init__(self, detail: str):
        super().__init__(f"{self.USER_MESSAGE} ({detail})")
        self.detail = detail


class StorageError(PlanProError):
    pass


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Invalid request: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PlanProError)
    async def _planpro_error(request: Request, exc: PlanProError):
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s: %s",
                request.method, request.url.path, type(exc).__name__, exc.message,
            )
        else:
            logger.info(
                "%s %s rejected (%d): %s",
                request.method, request.url.path, exc.status_code, exc.message,
            )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        return error_response(400, _format_validation_errors(exc))

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "Internal server error")
