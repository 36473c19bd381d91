"""Tests for the software JWT signer."""

import json
from unittest.mock import patch

import jwt
import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature

from entra_auth.oauth.codec import b64url_decode
from entra_auth.prt.payloads import UnsignedJwt
from entra_auth.prt.signing import JwtSigner, SoftwareJwtSigner
from entra_auth.utils.errors import SigningError


@pytest.fixture
def unsigned_jwt() -> UnsignedJwt:
    """An unsigned JWT with a small claim set."""
    return UnsignedJwt(payload=b'{"request_nonce":"abc123"}')


def split_jws(token: str) -> tuple[dict, bytes, bytes, bytes]:
    header_b64, payload_b64, signature_b64 = token.split(".")
    return (
        json.loads(b64url_decode(header_b64)),
        b64url_decode(payload_b64),
        b64url_decode(signature_b64),
        f"{header_b64}.{payload_b64}".encode(),
    )


class TestSoftwareJwtSigner:
    """Tests for SoftwareJwtSigner."""

    def test_is_jwt_signer(self):
        """Test that SoftwareJwtSigner satisfies the JwtSigner protocol."""
        assert isinstance(SoftwareJwtSigner(), JwtSigner)

    def test_rs256_signature_verifies(self, unsigned_jwt, rsa_private_key):
        """Test signing with an RSA key."""
        token = SoftwareJwtSigner().sign(unsigned_jwt, rsa_private_key)

        header, payload, signature, signing_input = split_jws(token)
        assert header == {"alg": "RS256", "typ": "JWT"}
        assert payload == unsigned_jwt.payload

        # Raises InvalidSignature on mismatch
        rsa_private_key.public_key().verify(
            signature, signing_input, padding.PKCS1v15(), hashes.SHA256()
        )

    def test_es256_signature_verifies(self, unsigned_jwt, ec_private_key):
        """Test signing with an EC P-256 key."""
        token = SoftwareJwtSigner().sign(unsigned_jwt, ec_private_key)

        header, _, signature, signing_input = split_jws(token)
        assert header["alg"] == "ES256"
        assert len(signature) == 64

        der = encode_dss_signature(
            int.from_bytes(signature[:32], "big"), int.from_bytes(signature[32:], "big")
        )
        ec_private_key.public_key().verify(der, signing_input, ec.ECDSA(hashes.SHA256()))

    def test_verifies_with_pyjwt(self, unsigned_jwt, ec_private_key):
        """Test that the ES256 token decodes with the public key."""
        token = SoftwareJwtSigner().sign(unsigned_jwt, ec_private_key)

        claims = jwt.decode(token, ec_private_key.public_key(), algorithms=["ES256"])
        assert claims == {"request_nonce": "abc123"}

    def test_kid_in_header(self, unsigned_jwt, rsa_private_key):
        """Test that a configured key ID is added to the header."""
        token = SoftwareJwtSigner(kid="device-key-1").sign(unsigned_jwt, rsa_private_key)
        header, _, _, _ = split_jws(token)
        assert header["kid"] == "device-key-1"

    def test_unsupported_key_type(self, unsigned_jwt):
        """Test that an Ed25519 key is rejected."""
        with pytest.raises(SigningError, match="Unsupported key type"):
            SoftwareJwtSigner().sign(unsigned_jwt, ed25519.Ed25519PrivateKey.generate())

    def test_unsupported_curve(self, unsigned_jwt):
        """Test that an EC key on another curve is rejected."""
        key = ec.generate_private_key(ec.SECP384R1())
        with pytest.raises(SigningError, match="Unsupported EC curve"):
            SoftwareJwtSigner().sign(unsigned_jwt, key)

    def test_missing_key(self, unsigned_jwt):
        """Test that a missing key handle is reported as a signing failure."""
        with pytest.raises(SigningError):
            SoftwareJwtSigner().sign(unsigned_jwt, None)

    def test_library_error_is_signing_error(self, unsigned_jwt, rsa_private_key):
        """Test that a JWT library failure is reported as SigningError."""
        with patch(
            "entra_auth.prt.signing.api_jws.encode",
            side_effect=jwt.InvalidKeyError("Could not parse the provided key"),
        ):
            with pytest.raises(SigningError, match="Could not parse"):
                SoftwareJwtSigner().sign(unsigned_jwt, rsa_private_key)
