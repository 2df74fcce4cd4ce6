"""Exceptions raised by the tracker client."""


class ClientError(Exception):
    """Base exception for client errors."""

    pass


class ApiError(ClientError):
    """A remote call failed: transport error, non-success status or bad body.

    status_code is None when no response was received.
    """

    def __init__(self, status_code: int | None, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class DraftValidationError(ClientError):
    """A draft or patch failed validation. Nothing was written."""

    pass


class WorkoutLockedError(ClientError):
    """Attempt to edit a completed workout."""

    pass


class SessionError(ClientError):
    """Session misuse: no active session, or the workout cannot be started."""

    pass
