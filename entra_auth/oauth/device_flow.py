"""Caller-side polling for the Device Authorization Grant (RFC 8628).

PublicClientApplication only performs single token requests. The helpers
here add the RFC 8628 Section 3.5 pacing for callers that want a ready-made
loop, such as the command line.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from ..utils.errors import AcquireTokenFailedError, RequestFailedError
from .application import PublicClientApplication
from .models import DeviceAuthorizationResponse, ErrorResponse, UserToken

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5
SLOW_DOWN_INCREMENT = 5


class DeviceFlowExpiredError(AcquireTokenFailedError):
    """Device code has expired."""

    pass


class DeviceFlowDeniedError(AcquireTokenFailedError):
    """User denied the authorization request."""

    pass


def format_device_instructions(flow: DeviceAuthorizationResponse) -> str:
    """Build the text shown to the user for a pending device authorization."""
    if flow.message:
        return flow.message

    lines = ["To authorize this device, please:", ""]
    if flow.verification_uri_complete:
        lines += [f"  Visit: {flow.verification_uri_complete}", "", "  OR", ""]
    lines += [
        f"  1. Visit: {flow.verification_uri}",
        f"  2. Enter code: {flow.user_code}",
        "",
        f"This code expires in {flow.expires_in // 60} minutes.",
    ]
    return "\n".join(lines)


async def poll_device_flow(
    app: PublicClientApplication,
    flow: DeviceAuthorizationResponse,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> UserToken:
    """Poll the token endpoint until the user authorizes or the code expires.

    Args:
        app: Application that issued the device code
        flow: Response from initiate_device_flow()
        sleep: Awaitable sleep, replaceable in tests
        clock: Monotonic clock in seconds, replaceable in tests

    Returns:
        UserToken once the user completes authorization

    Raises:
        DeviceFlowExpiredError: If the device code expires
        DeviceFlowDeniedError: If the user denies the request
        AcquireTokenFailedError: For other errors from the authority
        InvalidResponseError: If the authority sends a malformed response
    """
    start_time = clock()
    current_interval = flow.interval or DEFAULT_POLL_INTERVAL

    while True:
        if clock() - start_time >= flow.expires_in:
            raise DeviceFlowExpiredError(
                ErrorResponse(
                    error="expired_token",
                    error_description="Device code has expired before user completed authorization",
                )
            )

        try:
            token = await app.acquire_token_by_device_flow(flow)
            logger.info("Device authorization successful")
            return token

        except RequestFailedError as e:
            logger.warning(f"Network error during polling: {e}")

        except AcquireTokenFailedError as e:
            if e.error == "authorization_pending":
                logger.debug(f"Authorization pending, waiting {current_interval}s...")
            elif e.error == "slow_down":
                current_interval += SLOW_DOWN_INCREMENT
                logger.debug(f"Slowing down, new interval: {current_interval}s")
            elif e.error in ("expired_token", "code_expired"):
                raise DeviceFlowExpiredError(e.error_response, e.status_code) from e
            elif e.error in ("access_denied", "authorization_declined"):
                raise DeviceFlowDeniedError(e.error_response, e.status_code) from e
            else:
                raise

        await sleep(current_interval)
