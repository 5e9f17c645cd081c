"""Domain exceptions raised by the intake core.

The API layer maps each category to a distinct HTTP status and error code,
so callers can always tell a bad request from a missing case or a storage
failure.
"""


class CaseIntakeError(Exception):
    """Base class for intake and case lifecycle errors."""

    error_code = "CASE_INTAKE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(CaseIntakeError):
    """Required input missing or invalid; raised before any side effect."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NotFoundError(CaseIntakeError):
    """No case matches the given identifier."""

    error_code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ParseError(CaseIntakeError):
    """An uploaded file could not be parsed."""

    error_code = "PARSE_ERROR"

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Invalid content in file {filename}: {reason}")


class StorageError(CaseIntakeError):
    """The storage engine failed or rejected a write."""

    error_code = "STORAGE_ERROR"


class AuthError(CaseIntakeError):
    """Credential missing, invalid or expired, or identity not allowed."""

    error_code = "AUTHENTICATION_REQUIRED"

    def __init__(self, message: str = "Authentication required", status_code: int = 401):
        self.status_code = status_code
        if status_code == 403:
            self.error_code = "ACCESS_DENIED"
        super().__init__(message)
