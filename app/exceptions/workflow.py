"""Exceptions raised by the application lifecycle and messaging workflows."""

from app.exceptions.base import AppException
from app.exceptions.crud import AlreadyExistsError, ValidationError


class DuplicateApplicationError(AlreadyExistsError):
    """A volunteer applied twice to the same opportunity."""

    def __init__(self, opportunity_id: int):
        super().__init__(
            "Application",
            "opportunity_id",
            opportunity_id,
            message="You have already applied to this opportunity",
        )
        self.opportunity_id = opportunity_id


class InvalidTransitionError(AppException):
    """Application status change outside pending -> accepted | rejected."""

    def __init__(self, current: str, requested: str):
        """
        Parameters:
            current (str): Status the application is in.
            requested (str): Status the caller asked for.
        """
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change application status from '{current}' to '{requested}'"
        )


class EmptyMessageError(ValidationError):
    """Message content is blank once surrounding whitespace is removed."""

    def __init__(self):
        super().__init__("Message content cannot be empty", field="content")
