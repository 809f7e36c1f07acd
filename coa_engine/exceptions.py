"""Custom exception hierarchy for coa-engine."""


class CoaEngineError(Exception):
    """Base exception for all coa-engine errors."""


class ConfigurationError(CoaEngineError):
    """Raised when configuration is invalid or missing."""


class InvalidTreeError(CoaEngineError):
    """Raised when an account tree breaks a structural invariant."""

    def __init__(self, violations: list) -> None:
        self.violations = violations
        summary = "; ".join(str(v) for v in violations[:5])
        if len(violations) > 5:
            summary += f" (+{len(violations) - 5} more)"
        super().__init__(summary)


class InvalidAccountStateError(CoaEngineError):
    """Raised when an account is in an invalid state for the operation."""


class ApiError(CoaEngineError):
    """Raised when the REST boundary rejects or fails a request.

    ``message`` holds the server's text verbatim, or None when it sent none.
    """

    def __init__(self, message: str | None, status_code: int | None = None) -> None:
        if message:
            text = message
        elif status_code is not None:
            text = f"HTTP {status_code}"
        else:
            text = "API error"
        super().__init__(text)
        self.message = message
        self.status_code = status_code


class ValidationError(ApiError):
    """Bad input: missing required field, duplicate code, etc."""

    def __init__(
        self,
        message: str | None,
        status_code: int | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, status_code)
        self.field = field


class ConflictError(ApiError):
    """Delete or update blocked by a referential constraint."""


class NotFoundError(ApiError):
    """Referenced account id no longer exists."""


class NetworkError(ApiError):
    """Transport failure: connection refused, timeout, DNS, etc."""


class ServerError(ApiError):
    """5xx or otherwise unexpected response."""
