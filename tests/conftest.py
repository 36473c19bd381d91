"""Pytest configuration and fixtures for entra-auth tests."""

import base64
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from entra_auth.prt import PrtClientApplication

TEST_CLIENT_ID = "11111111-2222-3333-4444-555555555555"
TEST_TENANT_ID = "contoso.onmicrosoft.com"
TEST_AUTHORITY_HOST = "login.microsoftonline.com"

TEST_UID = "00000000-0000-0000-66f3-3332eca7ea81"
TEST_UTID = "9188040d-6c67-4c5b-b112-36a304b66dad"


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


@pytest.fixture
def id_token_claims() -> dict[str, Any]:
    """Claims for a sample identity token."""
    return {
        "aud": TEST_CLIENT_ID,
        "iss": f"https://login.microsoftonline.com/{TEST_UTID}/v2.0",
        "name": "Test User",
        "oid": "1c8a9b0e-3b44-4b7f-a2b0-9d6c6b3b0f11",
        "preferred_username": "user@contoso.com",
        "puid": "10032001A2B3C4D5",
        "tid": TEST_UTID,
    }


@pytest.fixture
def make_id_token() -> Callable[[dict[str, Any]], str]:
    """Factory for compact identity tokens with the given claims."""

    def _make(claims: dict[str, Any]) -> str:
        header = _b64url(json.dumps({"typ": "JWT", "alg": "RS256"}).encode())
        payload = _b64url(json.dumps(claims).encode())
        return f"{header}.{payload}.c2lnbmF0dXJl"

    return _make


@pytest.fixture
def make_client_info() -> Callable[..., str]:
    """Factory for base64url client_info blobs."""

    def _make(**fields: Any) -> str:
        return _b64url(json.dumps(fields).encode())

    return _make


@pytest.fixture
def client_info_blob(make_client_info) -> str:
    """A well-formed client_info blob."""
    return make_client_info(uid=TEST_UID, utid=TEST_UTID)


@pytest.fixture
def token_response(make_id_token, id_token_claims, client_info_blob) -> dict[str, Any]:
    """A successful v2.0 token endpoint response body."""
    return {
        "token_type": "Bearer",
        "scope": "openid profile offline_access User.Read",
        "expires_in": 4385,
        "ext_expires_in": 4385,
        "access_token": "test_access_token_12345",
        "refresh_token": "test_refresh_token_67890",
        "id_token": make_id_token(id_token_claims),
        "client_info": client_info_blob,
    }


@pytest.fixture
def device_code_response() -> dict[str, Any]:
    """A device authorization response body."""
    return {
        "device_code": "test_device_code",
        "user_code": "ABCD-EFGH",
        "verification_uri": "https://microsoft.com/devicelogin",
        "expires_in": 900,
        "interval": 5,
        "message": "To sign in, use a web browser to open the page "
        "https://microsoft.com/devicelogin and enter the code ABCD-EFGH to authenticate.",
    }


@pytest.fixture
def prt_response() -> dict[str, Any]:
    """A successful PRT response body."""
    return {
        "token_type": "Bearer",
        "refresh_token": "test_primary_refresh_token",
        "refresh_token_expires_in": 1209600,
        "session_key_jwe": "eyJlbmMiOiJBMjU2R0NNIiwiYWxnIjoiUlNBLU9BRVAifQ.a.b.c.d",
        "id_token": "eyJ0eXAiOiJKV1QifQ.eyJ0aWQiOiJ4In0.",
        "client_info": "eyJ1aWQiOiJ4In0",
    }


@pytest.fixture
def error_response() -> dict[str, Any]:
    """An Entra ID error response body."""
    return {
        "error": "invalid_grant",
        "error_description": "AADSTS50126: Error validating credentials due to invalid "
        "username or password.",
        "error_codes": [50126],
        "timestamp": "2024-01-15 10:00:00Z",
        "trace_id": "0f0f0f0f-1111-2222-3333-444444444444",
        "correlation_id": "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee",
    }


@pytest.fixture
def make_app() -> Callable[..., PrtClientApplication]:
    """Factory for an application whose transport is an httpx.MockTransport.

    The handler receives each httpx.Request and returns an httpx.Response.
    """

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        os_description: Callable[[], str | None] = lambda: None,
    ) -> PrtClientApplication:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return PrtClientApplication(
            client_id=TEST_CLIENT_ID,
            tenant_id=TEST_TENANT_ID,
            authority_host=TEST_AUTHORITY_HOST,
            http_client=http_client,
            os_description=os_description,
        )

    return _make


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """An RSA key standing in for the device identity key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_private_key() -> ec.EllipticCurvePrivateKey:
    """An EC P-256 key standing in for the device identity key."""
    return ec.generate_private_key(ec.SECP256R1())
