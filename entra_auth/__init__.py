"""entra-auth - Entra ID public client token acquisition, including Primary Refresh Tokens."""

__version__ = "0.1.0"

from .core.config import Settings
from .logging_config import setup_logging
from .oauth import (
    ClientInfo,
    DeviceAuthorizationResponse,
    ErrorResponse,
    IdToken,
    PrimaryRefreshToken,
    PublicClientApplication,
    UserToken,
    poll_device_flow,
)
from .prt import JwtSigner, PrtClientApplication, SoftwareJwtSigner
from .utils.errors import (
    AcquireTokenFailedError,
    ConfigurationError,
    InvalidResponseError,
    MsalError,
    RequestFailedError,
    SigningError,
)

__all__ = [
    "Settings",
    "setup_logging",
    "PublicClientApplication",
    "PrtClientApplication",
    "poll_device_flow",
    # Responses
    "DeviceAuthorizationResponse",
    "UserToken",
    "IdToken",
    "ClientInfo",
    "PrimaryRefreshToken",
    "ErrorResponse",
    # Signing
    "JwtSigner",
    "SoftwareJwtSigner",
    # Errors
    "MsalError",
    "ConfigurationError",
    "RequestFailedError",
    "InvalidResponseError",
    "AcquireTokenFailedError",
    "SigningError",
]
