"""Primary Refresh Token protocol ([MS-OAPXBC])."""

from .client import JWT_BEARER_GRANT_TYPE, PrtClientApplication
from .payloads import (
    BROKER_CLIENT_ID,
    PRT_SCOPE,
    RefreshTokenAuthenticationPayload,
    UnsignedJwt,
    UsernamePasswordAuthenticationPayload,
    local_os_description,
)
from .signing import JwtSigner, SoftwareJwtSigner

__all__ = [
    "PrtClientApplication",
    "JWT_BEARER_GRANT_TYPE",
    # Assertions
    "BROKER_CLIENT_ID",
    "PRT_SCOPE",
    "UsernamePasswordAuthenticationPayload",
    "RefreshTokenAuthenticationPayload",
    "UnsignedJwt",
    "local_os_description",
    # Signing
    "JwtSigner",
    "SoftwareJwtSigner",
]
