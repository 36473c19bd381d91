"""Error types for Entra ID token acquisition.

Every failure is raised to the immediate caller as one of the classes below so
that a network problem, a rejection by the authority and a local key store
failure can each be handled with a different retry policy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..oauth.models import ErrorResponse


class MsalError(Exception):
    """Base exception for token acquisition errors."""

    pass


class ConfigurationError(MsalError):
    """Raised when client configuration is missing or invalid."""

    pass


class RequestFailedError(MsalError):
    """Raised when the request never produced an HTTP response.

    Covers connection, TLS and timeout failures from the transport.
    """

    pass


class InvalidResponseError(MsalError):
    """Raised when a response body is not the expected JSON shape."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AcquireTokenFailedError(MsalError):
    """Raised when the authority returns a structured error payload."""

    def __init__(self, error_response: "ErrorResponse", status_code: int | None = None):
        self.error_response = error_response
        self.status_code = status_code
        self.error = error_response.error
        self.error_description = error_response.error_description
        message = (
            f"{self.error}: {self.error_description}" if self.error_description else self.error
        )
        super().__init__(message)


class SigningError(MsalError):
    """Raised when the key store fails to sign an assertion.

    Not retryable: the key is missing, access was denied or the hardware
    reported a fault.
    """

    pass


class ResponseDecodeError(MsalError, ValueError):
    """Raised when a nested encoded value in a response cannot be decoded."""

    pass
