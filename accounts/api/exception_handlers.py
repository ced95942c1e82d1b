"""Global exception handlers that map domain exceptions to HTTP responses."""

import logging
import time

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from accounts.core.i18n import get_language, translate
from accounts.errors import DomainError, ValidationFailure
from accounts.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(
    request: Request,
    status_code: int,
    message_key: str,
    validation_errors: dict[str, str] | None = None,
) -> JSONResponse:
    """Return the uniform error body with messages in the caller's language."""
    language = get_language(request)
    body = ErrorResponse(
        path=request.url.path,
        timestamp=int(time.time() * 1000),
        message=translate(message_key, language),
    )
    if validation_errors is not None:
        body.validation_errors = {
            field: translate(key, language) for field, key in validation_errors.items()
        }
    logger.error(
        "status: %s message: %s path: %s validationErrors: %s",
        status_code,
        message_key,
        request.url.path,
        validation_errors,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    validation_errors = exc.errors if isinstance(exc, ValidationFailure) else None
    return _error_response(request, exc.status_code, exc.message_key, validation_errors)


def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies and path parameters share the validation failure shape."""
    validation_errors = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        field = loc[-1] if loc else "body"
        validation_errors[field] = "validation_failure"
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "validation_failure",
        validation_errors,
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
