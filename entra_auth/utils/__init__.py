"""Utility functions and classes."""

from .errors import (
    AcquireTokenFailedError,
    ConfigurationError,
    InvalidResponseError,
    MsalError,
    RequestFailedError,
    ResponseDecodeError,
    SigningError,
)

__all__ = [
    "MsalError",
    "ConfigurationError",
    "RequestFailedError",
    "InvalidResponseError",
    "AcquireTokenFailedError",
    "SigningError",
    "ResponseDecodeError",
]
