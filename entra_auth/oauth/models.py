"""Typed token endpoint responses.

Models are immutable and built fresh for every response. Values that arrive as
encoded strings (``id_token``, ``client_info``) are decoded while the response
is validated, so a malformed nested value fails the whole response instead of
surfacing later.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .claims import ClientInfo, IdToken
from .codec import decode_client_info, decode_identity_token


class DeviceAuthorizationResponse(BaseModel):
    """Device Authorization Response (RFC 8628 Section 3.2).

    ``device_code`` is only used for the follow-up token request. It is left
    out of ``repr`` and of ``model_dump`` so it is not shown to users.
    """

    model_config = ConfigDict(frozen=True)

    device_code: str = Field(repr=False, exclude=True)
    user_code: str
    verification_uri: str
    # Entra ID does not send verification_uri_complete yet
    verification_uri_complete: str | None = None
    expires_in: int
    interval: int | None = None
    message: str | None = None


class UserToken(BaseModel):
    """Successful result of the password, refresh token and device code grants."""

    model_config = ConfigDict(frozen=True)

    token_type: str
    scope: str
    expires_in: int
    ext_expires_in: int
    access_token: str = Field(repr=False)
    refresh_token: str = Field(repr=False)
    id_token: IdToken
    client_info: ClientInfo = Field(default_factory=ClientInfo)

    @field_validator("id_token", mode="before")
    @classmethod
    def parse_id_token(cls, v: Any) -> IdToken:
        """Decode the compact identity token string into its claims."""
        if not isinstance(v, str):
            raise ValueError("id_token must be an encoded token string")
        return decode_identity_token(v)

    @field_validator("client_info", mode="before")
    @classmethod
    def parse_client_info(cls, v: Any) -> ClientInfo:
        """Decode the base64url client_info blob."""
        if not isinstance(v, str):
            raise ValueError("client_info must be an encoded string")
        return decode_client_info(v)


class PrimaryRefreshToken(BaseModel):
    """Result of the PRT request ([MS-OAPXBC] 3.2.5.1.2).

    The session key is still an encrypted JWE; decrypting it belongs to the
    key store. None of the secret fields appear in ``repr``.
    """

    model_config = ConfigDict(frozen=True)

    refresh_token: str = Field(repr=False)
    refresh_token_expires_in: int
    session_key_jwe: str = Field(repr=False)
    id_token: str = Field(repr=False)


class Nonce(BaseModel):
    """Server challenge returned for ``grant_type=srv_challenge``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    nonce: str = Field(alias="Nonce", repr=False)


class ErrorResponse(BaseModel):
    """Error payload returned by the authority (RFC 6749 Section 5.2)."""

    model_config = ConfigDict(frozen=True, extra="allow")

    error: str
    error_description: str | None = None
    error_codes: list[int] = Field(default_factory=list)
    timestamp: str | None = None
    trace_id: str | None = None
    correlation_id: str | None = None
    error_uri: str | None = None
    suberror: str | None = None
    claims: str | None = None
