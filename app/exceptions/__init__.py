"""
Application exceptions module.

This module provides a clean separation of concerns for error handling:
- Base exceptions define the hierarchy
- CRUD exceptions handle database operations
- Workflow exceptions handle application status changes and messaging
- Auth exceptions handle authentication/authorization
- HTTP mapping is handled separately in app/core/error_handlers.py
"""

from app.exceptions.base import AppException
from app.exceptions.crud import (
    NotFoundError,
    AlreadyExistsError,
    ValidationError,
    BackendUnavailableError,
)
from app.exceptions.workflow import (
    DuplicateApplicationError,
    InvalidTransitionError,
    EmptyMessageError,
)
from app.exceptions.auth import (
    AuthenticationError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InsufficientPermissionsError,
)

__all__ = [
    # Base
    "AppException",
    # CRUD
    "NotFoundError",
    "AlreadyExistsError",
    "ValidationError",
    "BackendUnavailableError",
    # Workflow
    "DuplicateApplicationError",
    "InvalidTransitionError",
    "EmptyMessageError",
    # Auth
    "AuthenticationError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "TokenExpiredError",
    "InsufficientPermissionsError",
]
