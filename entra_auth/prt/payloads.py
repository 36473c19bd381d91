"""Assertion payloads for the Primary Refresh Token request.

Both payloads are serialized as the claims of an unsigned JWT which the key
store then signs.
"""

import logging
import platform
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Well-known client ID of the Microsoft authentication broker
BROKER_CLIENT_ID = "38aa3b87-a06d-4817-b275-7a316988d93b"

PRT_SCOPE = "openid aza ugs"


def local_os_description() -> str | None:
    """Describe the local OS as ``"<PRETTY_NAME> <VERSION_ID>"``.

    Best effort: returns None when os-release is unavailable.
    """
    try:
        os_release = platform.freedesktop_os_release()
    except OSError as e:
        logger.debug(f"os-release not available: {e}")
        return None

    pretty_name = os_release.get("PRETTY_NAME")
    version_id = os_release.get("VERSION_ID")
    if not pretty_name or not version_id:
        return None
    return f"{pretty_name} {version_id}"


class _AuthenticationPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str = BROKER_CLIENT_ID
    request_nonce: str = Field(repr=False)
    scope: str = PRT_SCOPE
    win_ver: str | None = None

    def to_json_bytes(self) -> bytes:
        """Serialize in field order, leaving out win_ver when unknown."""
        return self.model_dump_json(exclude_none=True).encode("utf-8")


class UsernamePasswordAuthenticationPayload(_AuthenticationPayload):
    """Password assertion for the PRT request."""

    grant_type: str = "password"
    username: str
    password: str = Field(repr=False)


class RefreshTokenAuthenticationPayload(_AuthenticationPayload):
    """Refresh token assertion for the PRT request."""

    grant_type: str = "refresh_token"
    refresh_token: str = Field(repr=False)


class UnsignedJwt(BaseModel):
    """JWT claims and header awaiting a signature.

    ``payload`` is the exact claim bytes to sign. Signers add ``alg`` (and a
    key ID if they have one) to ``header``.
    """

    model_config = ConfigDict(frozen=True)

    payload: bytes = Field(repr=False)
    header: dict[str, Any] = Field(default_factory=lambda: {"typ": "JWT"})

    @classmethod
    def from_payload(cls, payload: _AuthenticationPayload) -> "UnsignedJwt":
        return cls(payload=payload.to_json_bytes())
