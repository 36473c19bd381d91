"""OAuth 2.0 token acquisition against Entra ID.

This package provides:
- Decoding of identity tokens and client_info blobs
- A form-encoded token endpoint client with typed errors
- Device Authorization Grant (RFC 8628), password and refresh token grants
"""

from .application import (
    BASELINE_SCOPES,
    DEVICE_CODE_GRANT_TYPE,
    DRS_APP_ID,
    PublicClientApplication,
    build_scope,
)
from .claims import ClientInfo, IdToken
from .codec import decode_client_info, decode_identity_token
from .device_flow import (
    DeviceFlowDeniedError,
    DeviceFlowExpiredError,
    format_device_instructions,
    poll_device_flow,
)
from .models import (
    DeviceAuthorizationResponse,
    ErrorResponse,
    Nonce,
    PrimaryRefreshToken,
    UserToken,
)
from .token_client import TokenEndpointClient, encode_form

__all__ = [
    # Application
    "PublicClientApplication",
    "TokenEndpointClient",
    "encode_form",
    "build_scope",
    "BASELINE_SCOPES",
    "DEVICE_CODE_GRANT_TYPE",
    "DRS_APP_ID",
    # Device Flow (RFC 8628)
    "poll_device_flow",
    "format_device_instructions",
    "DeviceFlowExpiredError",
    "DeviceFlowDeniedError",
    # Responses
    "DeviceAuthorizationResponse",
    "UserToken",
    "PrimaryRefreshToken",
    "Nonce",
    "ErrorResponse",
    "IdToken",
    "ClientInfo",
    "decode_identity_token",
    "decode_client_info",
]
