"""Signing capability used for PRT assertions.

The PRT request only needs "something that can sign a JWT with a key handle".
A TPM-backed signer, a platform enclave or the software signer below can all
be passed wherever a JwtSigner is expected. Signers report key store failures
as SigningError.
"""

import logging
from collections.abc import Awaitable
from typing import Any, Protocol, runtime_checkable

from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jwt import PyJWTError, api_jws

from ..utils.errors import SigningError
from .payloads import UnsignedJwt

logger = logging.getLogger(__name__)


@runtime_checkable
class JwtSigner(Protocol):
    """Signs an unsigned JWT with the key behind ``key_handle``.

    ``sign`` returns the compact serialization, either directly or as an
    awaitable. The caller owns ``key_handle``; a signer must not keep it.
    Implementations must allow at most one signing operation per key handle
    at a time, or serialize internally.
    """

    def sign(self, jwt: UnsignedJwt, key_handle: Any) -> str | Awaitable[str]: ...


class SoftwareJwtSigner:
    """JwtSigner for keys held in memory by ``cryptography``.

    Supports RSA keys (RS256) and EC P-256 keys (ES256). The compact JWS is
    produced by PyJWT.
    """

    def __init__(self, kid: str | None = None):
        """Initialize the signer.

        Args:
            kid: Optional key ID added to the JWT header
        """
        self.kid = kid

    def _algorithm(self, key: Any) -> str:
        if isinstance(key, rsa.RSAPrivateKey):
            return "RS256"
        if isinstance(key, ec.EllipticCurvePrivateKey):
            if not isinstance(key.curve, ec.SECP256R1):
                raise SigningError(f"Unsupported EC curve: {key.curve.name}")
            return "ES256"
        raise SigningError(f"Unsupported key type: {type(key).__name__}")

    def sign(self, jwt: UnsignedJwt, key_handle: Any) -> str:
        """Sign ``jwt`` and return the compact JWS.

        Raises:
            SigningError: If the key is unsupported or signing fails
        """
        alg = self._algorithm(key_handle)
        headers = dict(jwt.header)
        if self.kid:
            headers["kid"] = self.kid

        try:
            return api_jws.encode(jwt.payload, key_handle, algorithm=alg, headers=headers)
        except (PyJWTError, ValueError, TypeError) as e:
            logger.error(f"Software signing failed: {e}")
            raise SigningError(f"Failed signing jwt: {e}") from e
