"""HTTP error handlers for FastAPI application.

This module provides the bridge between application exceptions and HTTP responses.
It maps domain-level exceptions to appropriate HTTP status codes and response formats.

Purpose:
    - Keep HTTP concerns separate from business logic
    - Provide consistent error response format across the API
    - Allow easy modification of HTTP responses without changing domain logic
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.exceptions import (
    AppException,
    NotFoundError,
    AlreadyExistsError,
    ValidationError,
    BackendUnavailableError,
    InvalidTransitionError,
    AuthenticationError,
    InsufficientPermissionsError,
)
from app.utils.logger import logger


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """
    Map a NotFoundError to an HTTP 404 JSON response.

    Returns:
        JSONResponse: Response with status 404 and a JSON body `{"detail": "<exception message>"}`.
    """
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
    )


async def already_exists_handler(
    request: Request, exc: AlreadyExistsError
) -> JSONResponse:
    """
    Convert an AlreadyExistsError (including duplicate applications) into 409 Conflict.

    Returns:
        JSONResponse: Response with status 409 and the exception message as `detail`.
    """
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
    )


async def invalid_transition_handler(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    """
    Convert an InvalidTransitionError into 409 Conflict.

    The body carries the application's current status so clients can refresh their view.
    """
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "current_status": exc.current},
    )


async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """
    Convert a ValidationError into an HTTP 422 Unprocessable Entity JSON response.

    Returns:
        JSONResponse: Response with status 422 and a JSON body containing a `detail` message and, when available, a `field` key.
    """
    content = {"detail": str(exc)}
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, content=content
    )


async def backend_unavailable_handler(
    request: Request, exc: BackendUnavailableError
) -> JSONResponse:
    """
    Convert a BackendUnavailableError into 503 Service Unavailable.

    Nothing is retried server-side; the client shows the message and lets the user resubmit.
    """
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)}
    )


async def insufficient_permissions_handler(
    request: Request, exc: InsufficientPermissionsError
) -> JSONResponse:
    """
    Handle an InsufficientPermissionsError by returning a 403 Forbidden JSON response.
    """
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)}
    )


async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    """
    Convert an AuthenticationError into a 401 Unauthorized JSON response that includes a WWW-Authenticate header.
    """
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},  # OAuth2 spec compliance
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle unhandled application-level exceptions and produce a standardized 500 Internal Server Error response.
    """
    logger.opt(exception=exc).error(
        f"Unhandled application error on {request.method} {request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal error occurred"},
    )


def register_exception_handlers(app) -> None:
    """
    Register the application's domain-to-HTTP exception handlers on a FastAPI app.

    Handlers resolve by the exception's class hierarchy, so subclasses such as
    DuplicateApplicationError (409), EmptyMessageError (422) and
    InsufficientPermissionsError (403) reach their closest registered handler.
    Mappings: NotFoundError -> 404, AlreadyExistsError -> 409, InvalidTransitionError
    -> 409, ValidationError -> 422 (with optional `field`), BackendUnavailableError ->
    503, InsufficientPermissionsError -> 403, AuthenticationError -> 401 and
    AppException -> 500.

    Parameters:
        app: The FastAPI application instance to which the exception handlers will be attached.
    """
    # CRUD exception handlers
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(AlreadyExistsError, already_exists_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(BackendUnavailableError, backend_unavailable_handler)

    # Workflow
    app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)

    # Auth exception handlers (specific before general)
    app.add_exception_handler(
        InsufficientPermissionsError, insufficient_permissions_handler
    )
    app.add_exception_handler(AuthenticationError, authentication_error_handler)

    # Catch-all for unhandled application exceptions
    app.add_exception_handler(AppException, app_exception_handler)
