"""
Errors raised while talking to the data.gov.in mandi API.
"""
from typing import Optional


class MandiError(RuntimeError):
    """Base class for provider failures."""


class MandiHTTPError(MandiError):
    """The provider answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"API Error: {status_code} {reason}".rstrip())


class MandiNetworkError(MandiError):
    """The request could not be sent, or the body was not JSON."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
