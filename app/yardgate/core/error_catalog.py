from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_400_BAD_REQUEST,
    )
    TEMP_KEY_REQUIRED = ErrorDefinition(
        "TEMP_KEY_REQUIRED",
        "Deletion only allowed for temporary uploads",
        status.HTTP_403_FORBIDDEN,
    )
    TRAILER_NOT_FOUND = ErrorDefinition(
        "TRAILER_NOT_FOUND",
        "Trailer not found",
        status.HTTP_404_NOT_FOUND,
    )
    TRAILER_ALREADY_IN = ErrorDefinition(
        "TRAILER_ALREADY_IN",
        "Trailer is already IN. Next movement must be OUT.",
        status.HTTP_409_CONFLICT,
    )
    TRAILER_ALREADY_OUT = ErrorDefinition(
        "TRAILER_ALREADY_OUT",
        "Trailer is already OUT. Next movement must be IN.",
        status.HTTP_409_CONFLICT,
    )
    YARD_CAPACITY_REACHED = ErrorDefinition(
        "YARD_CAPACITY_REACHED",
        "Yard capacity reached. Cannot move IN another trailer.",
        status.HTTP_409_CONFLICT,
    )
    TRAILER_ALREADY_EXISTS = ErrorDefinition(
        "TRAILER_ALREADY_EXISTS",
        "A trailer with this number or VIN already exists",
        status.HTTP_409_CONFLICT,
    )
    TRAILER_STATE_CHANGED = ErrorDefinition(
        "TRAILER_STATE_CHANGED",
        "Trailer status changed by a concurrent movement",
        status.HTTP_409_CONFLICT,
    )
    LOCK_TIMEOUT = ErrorDefinition(
        "LOCK_TIMEOUT",
        "Lock wait timeout",
        status.HTTP_409_CONFLICT,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    STORAGE_FAULT = ErrorDefinition(
        "STORAGE_FAULT",
        "Object storage operation failed",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    IDEMPOTENCY_REPLAY = ErrorDefinition(
        "IDEMPOTENCY_REPLAY",
        "Idempotent replay: movement already exists.",
        status.HTTP_200_OK,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None, message: str | None = None):
        self.error = error
        self.details = details
        self.message = message or error.message
        super().__init__(self.message)


class StorageFaultError(AppError):
    """Object store call failed; carries the failing operation and key."""

    def __init__(self, message: str, *, operation: str, key: str | None = None):
        super().__init__(
            ErrorCatalog.STORAGE_FAULT,
            details={"operation": operation, "key": key},
            message=message,
        )
        self.operation = operation
        self.key = key
