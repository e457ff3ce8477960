"""Domain error codes for event management and booking."""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    CAPACITY_CONFLICT = "CAPACITY_CONFLICT"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    LOGIN_LOCKED = "LOGIN_LOCKED"
    LEDGER_BUSY = "LEDGER_BUSY"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input is malformed or out of range."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class EventNotFoundError(DomainError):
    """Raised when an event does not exist, or is not visible to the caller."""

    code = ErrorCode.EVENT_NOT_FOUND
    status_code = 404

    def __init__(self, event_id: int) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class CapacityConflictError(DomainError):
    """Raised when a booking asks for more tickets than remain."""

    code = ErrorCode.CAPACITY_CONFLICT
    status_code = 409

    def __init__(self, event_id: int, full_price_remaining: int, concession_remaining: int) -> None:
        super().__init__("Not enough tickets available")
        self.event_id = event_id
        self.full_price_remaining = full_price_remaining
        self.concession_remaining = concession_remaining


class InvalidTransitionError(DomainError):
    """Raised when a lifecycle transition is not allowed from the current status."""

    code = ErrorCode.INVALID_TRANSITION
    status_code = 409


class InvalidCredentialsError(DomainError):
    code = ErrorCode.INVALID_CREDENTIALS
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid credentials. Please try again.")


class LoginLockedError(DomainError):
    code = ErrorCode.LOGIN_LOCKED
    status_code = 429

    def __init__(self, minutes_left: int) -> None:
        super().__init__(f"Too many failed attempts. Please try again in {minutes_left} minutes.")
        self.minutes_left = minutes_left


class LedgerBusyError(DomainError):
    """Raised when the per-event ledger lock cannot be obtained in time."""

    code = ErrorCode.LEDGER_BUSY
    status_code = 503

    def __init__(self) -> None:
        super().__init__("Could not acquire lock, please try again.")
