"""Authentication and authorization exceptions."""

from app.exceptions.base import AppException


class AuthenticationError(AppException):
    """Base class for authentication-related errors."""

    pass


class InvalidCredentialsError(AuthenticationError):
    """Email or password is incorrect."""

    def __init__(self, message: str = "Incorrect email or password"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Token is invalid, expired, or malformed."""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Token has expired (more specific than InvalidTokenError)."""

    def __init__(self, token_type: str = "access"):
        """
        Initialize a TokenExpiredError for a specific token type.

        Parameters:
            token_type (str): Type of the expired token ("access" or "refresh"), kept on the instance as `token_type`.
        """
        super().__init__(f"{token_type.capitalize()} token has expired")
        self.token_type = token_type


class InsufficientPermissionsError(AuthenticationError):
    """The authenticated user is not allowed to perform this action."""

    def __init__(self, action: str | None = None):
        """
        Parameters:
            action (str | None): What the caller tried to do, e.g. "update this opportunity".
                When given the message reads "Insufficient permissions to <action>".
        """
        self.action = action
        message = (
            f"Insufficient permissions to {action}"
            if action
            else "Insufficient permissions"
        )
        super().__init__(message)
