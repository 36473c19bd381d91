"""Primary Refresh Token acquisition ([MS-OAPXBC]).

A PRT request runs four steps in order:
1. Fetch a single-use nonce from the untenanted ``srv_challenge`` endpoint
2. Build the password or refresh token assertion around that nonce
3. Have the signing capability sign the assertion with the device key
4. POST the signed assertion as a jwt-bearer grant to the legacy token endpoint

A fresh nonce is fetched for every attempt. No step is retried.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from ..oauth.application import PublicClientApplication
from ..oauth.models import Nonce, PrimaryRefreshToken
from ..utils.errors import SigningError
from .payloads import (
    RefreshTokenAuthenticationPayload,
    UnsignedJwt,
    UsernamePasswordAuthenticationPayload,
    local_os_description,
)
from .signing import JwtSigner

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"

OsDescriptionProvider = Callable[[], str | None]


class PrtClientApplication(PublicClientApplication):
    """Public client application that can also acquire Primary Refresh Tokens.

    The PRT and its session key are long-lived, device-bound secrets. They are
    returned to the caller and never logged.
    """

    def __init__(
        self,
        *args,
        os_description: OsDescriptionProvider = local_os_description,
        **kwargs,
    ):
        """Initialize the application.

        Args:
            os_description: Returns the OS string sent as ``win_ver``, or None
                to leave it out
            *args, **kwargs: Passed to PublicClientApplication
        """
        super().__init__(*args, **kwargs)
        self.os_description = os_description

    async def request_nonce(self) -> str:
        """Request a server nonce for the next signed assertion.

        Returns:
            Nonce value, valid for one signing operation
        """
        params = [("grant_type", "srv_challenge")]
        nonce = await self.request(self.nonce_endpoint, params, Nonce)
        logger.debug("Received PRT request nonce")
        return nonce.nonce

    async def acquire_user_prt_by_username_password(
        self,
        username: str,
        password: str,
        signer: JwtSigner,
        key_handle: Any,
    ) -> PrimaryRefreshToken:
        """Acquire a PRT with a username/password assertion.

        Args:
            username: User principal name
            password: User password
            signer: Signing capability for the device key
            key_handle: Handle of the device identity key, owned by the caller

        Returns:
            PrimaryRefreshToken with the encrypted session key

        Raises:
            RequestFailedError: If a request could not be sent
            AcquireTokenFailedError: If the authority rejects a request
            InvalidResponseError: If a response body is malformed
            SigningError: If the key store fails to sign the assertion
        """
        nonce = await self.request_nonce()
        payload = UsernamePasswordAuthenticationPayload(
            request_nonce=nonce,
            win_ver=self.os_description(),
            username=username,
            password=password,
        )
        return await self._acquire_user_prt_jwt(
            UnsignedJwt.from_payload(payload), signer, key_handle
        )

    async def acquire_user_prt_silent(
        self,
        refresh_token: str,
        signer: JwtSigner,
        key_handle: Any,
    ) -> PrimaryRefreshToken:
        """Acquire a PRT with a refresh token assertion.

        Args:
            refresh_token: Refresh token from an earlier UserToken
            signer: Signing capability for the device key
            key_handle: Handle of the device identity key, owned by the caller

        Returns:
            PrimaryRefreshToken with the encrypted session key
        """
        nonce = await self.request_nonce()
        payload = RefreshTokenAuthenticationPayload(
            request_nonce=nonce,
            win_ver=self.os_description(),
            refresh_token=refresh_token,
        )
        return await self._acquire_user_prt_jwt(
            UnsignedJwt.from_payload(payload), signer, key_handle
        )

    async def _sign(self, jwt: UnsignedJwt, signer: JwtSigner, key_handle: Any) -> str:
        try:
            signed = signer.sign(jwt, key_handle)
            # Hardware signers may be async
            if inspect.isawaitable(signed):
                signed = await signed
        except SigningError as e:
            logger.error(f"Signing PRT request failed: {e}")
            raise
        except Exception as e:
            # Key store faults (missing device, driver errors) are not retryable
            logger.error(f"Signing PRT request failed: {type(e).__name__}: {e}")
            raise SigningError(f"Failed signing jwt: {e}") from e
        return signed

    async def _acquire_user_prt_jwt(
        self,
        jwt: UnsignedJwt,
        signer: JwtSigner,
        key_handle: Any,
    ) -> PrimaryRefreshToken:
        # [MS-OAPXBC] 3.2.5.1.2 POST (Request for Primary Refresh Token)
        signed_jwt = await self._sign(jwt, signer, key_handle)

        params = [
            ("windows_api_version", "2.0"),
            ("grant_type", JWT_BEARER_GRANT_TYPE),
            ("request", signed_jwt),
            ("client_info", "1"),
            ("tgt", "true"),
        ]

        logger.info("Requesting primary refresh token")
        prt = await self.request(self.prt_token_endpoint, params, PrimaryRefreshToken)
        logger.info(f"Primary refresh token issued, expires in {prt.refresh_token_expires_in}s")
        return prt
