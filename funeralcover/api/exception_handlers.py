"""Global exception handlers that map domain exceptions to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from funeralcover.errors import (
    ACCESS_DENIED,
    DUPLICATE_RESOURCE,
    FORBIDDEN,
    INVALID_TRANSITION,
    NOT_FOUND,
    NOT_IMPLEMENTED,
    UNAUTHORIZED,
    UNAVAILABLE,
    VALIDATION_ERROR,
    AccessDeniedError,
    DomainValidationError,
    DuplicateResourceError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    NotSupportedError,
    UnauthorizedError,
    UnavailableError,
)
from funeralcover.schemas.error import AccessDeniedResponse, ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def domain_validation_error_handler(
    _request: Request, exc: DomainValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        VALIDATION_ERROR,
    )


def duplicate_resource_error_handler(
    _request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        DUPLICATE_RESOURCE,
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        str(exc),
        NOT_FOUND,
    )


def access_denied_error_handler(_request: Request, exc: AccessDeniedError) -> JSONResponse:
    body = AccessDeniedResponse(
        detail=str(exc),
        code=ACCESS_DENIED,
        reason=exc.reason,
        trial_expired=exc.trial_expired,
    )
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=body.model_dump())


def invalid_transition_error_handler(
    _request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        INVALID_TRANSITION,
    )


def not_supported_error_handler(_request: Request, exc: NotSupportedError) -> JSONResponse:
    return _error_response(
        status.HTTP_501_NOT_IMPLEMENTED,
        str(exc),
        NOT_IMPLEMENTED,
    )


def unavailable_error_handler(_request: Request, exc: UnavailableError) -> JSONResponse:
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        str(exc),
        UNAVAILABLE,
    )


def storage_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Storage failure: %s", exc)
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Storage is unavailable",
        UNAVAILABLE,
    )


def forbidden_error_handler(_request: Request, exc: ForbiddenError) -> JSONResponse:
    return _error_response(
        status.HTTP_403_FORBIDDEN,
        str(exc),
        FORBIDDEN,
    )


def unauthorized_error_handler(_request: Request, exc: UnauthorizedError) -> JSONResponse:
    return _error_response(
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        UNAUTHORIZED,
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainValidationError, domain_validation_error_handler)
    app.add_exception_handler(DuplicateResourceError, duplicate_resource_error_handler)
    app.add_exception_handler(AccessDeniedError, access_denied_error_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_error_handler)
    app.add_exception_handler(NotSupportedError, not_supported_error_handler)
    app.add_exception_handler(UnavailableError, unavailable_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(ForbiddenError, forbidden_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_error_handler)
