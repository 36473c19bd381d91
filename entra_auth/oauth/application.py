"""Public client grant flows for Entra ID.

Implements device authorization initiation, the single-shot device code
exchange, the resource owner password grant and the refresh token (silent)
grant on top of TokenEndpointClient.
"""

import logging
from collections.abc import Sequence

import httpx

from ..core.config import Settings
from ..utils.errors import ConfigurationError
from .models import DeviceAuthorizationResponse, UserToken
from .token_client import TokenEndpointClient

logger = logging.getLogger(__name__)

# Always requested ahead of caller scopes
BASELINE_SCOPES = ("openid", "profile", "offline_access")

# RFC 8628 grant type URN
DEVICE_CODE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"

# Device Registration Service application ID
DRS_APP_ID = "01cb2876-7ebd-4aa4-9cc9-d28bd4d359a9"


def build_scope(scopes: Sequence[str]) -> str:
    """Join the baseline scopes and caller scopes into one scope parameter.

    Caller scopes follow the baseline in their given order. Duplicates are
    kept.
    """
    return " ".join([*BASELINE_SCOPES, *scopes])


class PublicClientApplication(TokenEndpointClient):
    """Entra ID public client application.

    Each method performs exactly one request against the authority and
    returns a typed result. Nothing is cached and nothing is retried; callers
    keep refresh tokens and decide how to retry.

    Example:
        app = PublicClientApplication(client_id, tenant_id)
        flow = await app.initiate_device_flow(["User.Read"])
        print(flow.message)
        token = await app.acquire_token_by_device_flow(flow)
    """

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
        **kwargs,
    ):
        """Create an application from loaded Settings.

        Raises:
            ConfigurationError: If client_id or tenant_id is not configured
        """
        if not settings.client_id:
            raise ConfigurationError("ENTRA_CLIENT_ID is not configured")
        if not settings.tenant_id:
            raise ConfigurationError("ENTRA_TENANT_ID is not configured")

        return cls(
            client_id=settings.client_id,
            tenant_id=settings.tenant_id,
            authority_host=settings.authority_host,
            http_client=http_client,
            timeout=settings.request_timeout,
            **kwargs,
        )

    async def initiate_device_flow(
        self, scopes: Sequence[str] = ()
    ) -> DeviceAuthorizationResponse:
        """Start a device authorization flow (RFC 8628 Section 3.1).

        Args:
            scopes: Scopes requested in addition to the baseline scopes

        Returns:
            DeviceAuthorizationResponse with the user code and verification URL

        Raises:
            RequestFailedError: If the request could not be sent
            AcquireTokenFailedError: If the authority rejects the request
            InvalidResponseError: If the response body is malformed
        """
        params = [
            ("client_id", self.client_id),
            ("scope", build_scope(scopes)),
        ]

        logger.info("Requesting device code...")
        flow = await self.request(self.device_code_endpoint, params, DeviceAuthorizationResponse)
        logger.debug(f"Device code issued, expires in {flow.expires_in}s")
        return flow

    async def acquire_token_by_device_flow(self, flow: DeviceAuthorizationResponse) -> UserToken:
        """Exchange the device code for tokens once.

        This is a single token request, not a polling loop. While the user has
        not finished signing in the authority answers ``authorization_pending``
        (raised as AcquireTokenFailedError); ``flow`` is left untouched so the
        caller can try again after ``flow.interval`` seconds. See
        ``device_flow.poll_device_flow`` for a ready-made loop.

        Args:
            flow: Response from initiate_device_flow()

        Returns:
            UserToken once the user has authorized the device
        """
        params = [
            ("client_id", self.client_id),
            ("grant_type", DEVICE_CODE_GRANT_TYPE),
            ("device_code", flow.device_code),
        ]
        return await self.request(self.token_endpoint, params, UserToken)

    async def acquire_token_by_username_password(
        self,
        username: str,
        password: str,
        scopes: Sequence[str] = (),
    ) -> UserToken:
        """Acquire tokens with the resource owner password grant.

        Args:
            username: User principal name
            password: User password
            scopes: Scopes requested in addition to the baseline scopes

        Returns:
            UserToken including decoded id_token and client_info
        """
        params = [
            ("client_id", self.client_id),
            ("scope", build_scope(scopes)),
            ("username", username),
            ("password", password),
            ("grant_type", "password"),
            ("client_info", "1"),
        ]

        logger.info("Acquiring token by username/password")
        return await self.request(self.token_endpoint, params, UserToken)

    async def acquire_token_for_device_enrollment(self, username: str, password: str) -> UserToken:
        """Acquire a token for the Device Registration Service."""
        return await self.acquire_token_by_username_password(
            username, password, [f"{DRS_APP_ID}/.default"]
        )

    async def acquire_token_silent(self, scopes: Sequence[str], refresh_token: str) -> UserToken:
        """Redeem a refresh token for new tokens.

        Args:
            scopes: Scopes requested in addition to the baseline scopes
            refresh_token: Refresh token from an earlier UserToken

        Returns:
            UserToken including decoded id_token and client_info
        """
        params = [
            ("client_id", self.client_id),
            ("scope", build_scope(scopes)),
            ("grant_type", "refresh_token"),
            ("refresh_token", refresh_token),
            ("client_info", "1"),
        ]

        logger.info("Acquiring token silently with refresh token")
        return await self.request(self.token_endpoint, params, UserToken)
