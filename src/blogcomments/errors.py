from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class ValidationError(UserError):
    """Raised when user input fails validation."""


class InvalidRequestError(UserError):
    """Raised when the request body cannot be parsed."""

    def __init__(self, message: str = "Invalid JSON") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a device token does not own the targeted comment.

    Also raised when the comment does not exist, so ids of other devices are not revealed.
    """

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class StoreError(Exception):
    """Raised when the comment store fails. The backend message is passed through to the client."""
