"""Decoders for the encoded values nested inside token responses.

The identity token and the client_info blob both arrive as base64url strings
wrapping a JSON object. No signature verification is done here: the token is
trusted because it came back from the server-authenticated token endpoint.
"""

import base64
import binascii
import json
import re
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from ..utils.errors import ResponseDecodeError
from .claims import ClientInfo, IdToken

_BASE64URL_RE = re.compile(r"^[A-Za-z0-9_-]*$")


def b64url_decode(value: str) -> bytes:
    """Decode unpadded base64url.

    Raises:
        ValueError: If the value is padded or not valid base64url
    """
    if not _BASE64URL_RE.match(value):
        raise ValueError("Invalid base64url character or padding")
    try:
        return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
    except binascii.Error as e:
        raise ValueError(str(e)) from e


def b64url_encode(data: bytes) -> str:
    """Encode bytes as unpadded base64url."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _decode_json_segment(segment: str, what: str) -> Any:
    try:
        return json.loads(b64url_decode(segment).decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as e:
        # json.JSONDecodeError is a ValueError
        raise ResponseDecodeError(f"Failed parsing {what}: {e}") from e


def decode_identity_token(raw: str) -> IdToken:
    """Decode the claims of a compact identity token.

    Args:
        raw: Compact token ``header.payload[.signature]``

    Returns:
        IdToken built from the payload segment

    Raises:
        ResponseDecodeError: If the payload segment is missing or malformed
    """
    parts = raw.split(".", 2)
    if len(parts) < 2:
        raise ResponseDecodeError("Failed parsing id_token payload")

    claims = _decode_json_segment(parts[1], "id_token")
    if not isinstance(claims, dict):
        raise ResponseDecodeError("Failed parsing id_token: payload is not a JSON object")

    try:
        return IdToken.model_validate(claims)
    except ValidationError as e:
        raise ResponseDecodeError(f"Failed parsing id_token from json: {e}") from e


def decode_client_info(raw: str) -> ClientInfo:
    """Decode the client_info blob into user and tenant identifiers.

    Args:
        raw: base64url (unpadded) JSON object with ``uid`` and ``utid``

    Returns:
        ClientInfo with both identifiers set

    Raises:
        ResponseDecodeError: If either identifier is missing or not a UUID
    """
    info = _decode_json_segment(raw, "client_info")
    if not isinstance(info, dict):
        raise ResponseDecodeError("Failed parsing client_info: not a JSON object")

    identifiers: dict[str, UUID] = {}
    for field in ("uid", "utid"):
        value = info.get(field)
        if not isinstance(value, str):
            raise ResponseDecodeError(f"Failed parsing client_info: missing {field}")
        try:
            identifiers[field] = UUID(value)
        except ValueError as e:
            raise ResponseDecodeError(f"Failed parsing client_info {field}: {e}") from e

    return ClientInfo(uid=identifiers["uid"], utid=identifiers["utid"])
