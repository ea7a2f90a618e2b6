class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTimeError(ValidationError):
    """Raised when a wall-clock string is not a valid 24-hour HH:MM value."""


class SessionClosedError(DomainError):
    """Raised when a completed duty session is asked to change."""


class NotFoundError(DomainError):
    """Raised when an operation references a record or session that does not exist."""


class OpenRecordsRemainError(DomainError):
    """Raised when completion is blocked by attendance records without an out-time."""

    def __init__(self, count: int):
        super().__init__(f"{count} attendance record(s) still have no out-time")
        self.count = int(count)
