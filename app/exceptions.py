"""
Error taxonomy for the query API.

Every error carries its HTTP status and renders its own JSON body, so the
exception handler in ``app.main`` only has to call ``body()``.
"""
from typing import Any, Dict, List, Optional


class MeterAnalyticsError(Exception):
    """Base class for errors reported to API clients."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.error
        self.details = details
        super().__init__(self.message)

    def body(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            content["details"] = self.details
        return content


class MissingParameter(MeterAnalyticsError):
    """Required filter parameters were not supplied."""

    status_code = 400

    def __init__(self, required: List[str], received: Optional[Dict[str, Any]] = None):
        self.required = list(required)
        self.received = received
        noun = "parameter" if len(self.required) == 1 else "parameters"
        super().__init__(f"Missing required {noun}: {' and '.join(self.required)}")

    def body(self) -> Dict[str, Any]:
        content = super().body()
        if self.received is not None:
            content["received"] = self.received
        return content


class QueryFailure(MeterAnalyticsError):
    """The data store rejected or failed a query; ``details`` holds its message."""

    status_code = 500

    def __init__(self, details: str, message: str = "Internal Server Error"):
        super().__init__(message, details=details)

    @classmethod
    def wrap(cls, exc: Exception, message: str = "Internal Server Error") -> "QueryFailure":
        """Build from a driver/SQLAlchemy error, keeping the driver's own message."""
        orig = getattr(exc, "orig", None)
        return cls(str(orig if orig is not None else exc), message=message)


class NotFound(MeterAnalyticsError):
    """Unknown API path."""

    status_code = 404
    error = "API endpoint not found"


class RequestTimeout(MeterAnalyticsError):
    """The request exceeded the server deadline."""

    status_code = 408
    error = "Request Timeout"
