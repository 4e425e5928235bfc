"""Root of the application exception hierarchy."""


class AppException(Exception):
    """Base class for every domain error raised by the service layer."""

    def __init__(self, message: str = "An application error occurred"):
        """
        Initialize the exception with a human-readable message.

        Parameters:
            message (str): Description of the failure, exposed as `str(exc)` and `exc.message`.
        """
        self.message = message
        super().__init__(message)
