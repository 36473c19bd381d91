"""Token endpoint client for the Entra ID authority.

This module builds form-encoded requests for the authority's OAuth 2.0
endpoints and turns HTTP responses into typed results or typed errors.
"""

import logging
from collections.abc import Sequence
from typing import TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from ..core.config import DEFAULT_AUTHORITY_HOST
from ..utils.errors import AcquireTokenFailedError, InvalidResponseError, RequestFailedError
from .models import ErrorResponse

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

FormParams = Sequence[tuple[str, str]]

FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}


def encode_form(params: FormParams) -> str:
    """Encode ordered key/value pairs as an x-www-form-urlencoded body.

    Values are percent-encoded (a space becomes ``%20``) and the pairs keep
    their order.
    """
    return "&".join(f"{key}={quote(value, safe='')}" for key, value in params)


class TokenEndpointClient:
    """POSTs form requests to the authority and classifies the responses.

    Holds only read-only configuration, so one instance can be shared by
    concurrent tasks. Pass ``http_client`` to reuse a connection pool; without
    it a short-lived ``httpx.AsyncClient`` is opened for each request.
    """

    def __init__(
        self,
        client_id: str,
        tenant_id: str,
        authority_host: str = DEFAULT_AUTHORITY_HOST,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        """Initialize the token endpoint client.

        Args:
            client_id: Application (client) ID of the public client
            tenant_id: Tenant ID or domain used for tenant-scoped endpoints
            authority_host: Authority host name (default: login.microsoftonline.com)
            http_client: Optional shared AsyncClient used as the transport
            timeout: Per-request timeout in seconds when no http_client is given
        """
        self.client_id = client_id
        self.tenant_id = tenant_id
        self.authority_host = authority_host
        self.timeout = timeout
        self._http_client = http_client

    @property
    def device_code_endpoint(self) -> str:
        return f"https://{self.authority_host}/{self.tenant_id}/oauth2/v2.0/devicecode"

    @property
    def token_endpoint(self) -> str:
        return f"https://{self.authority_host}/{self.tenant_id}/oauth2/v2.0/token"

    @property
    def nonce_endpoint(self) -> str:
        # Not tenant scoped
        return f"https://{self.authority_host}/common/oauth2/token"

    @property
    def prt_token_endpoint(self) -> str:
        return f"https://{self.authority_host}/{self.tenant_id}/oauth2/token"

    async def _post(self, url: str, params: FormParams) -> httpx.Response:
        """POST a form body and return the raw response.

        Raises:
            RequestFailedError: If no response was received
        """
        body = encode_form(params)
        grant_type = dict(params).get("grant_type", "-")
        logger.debug(f"POST {url} (grant_type={grant_type})")

        try:
            if self._http_client is not None:
                return await self._http_client.post(url, content=body, headers=FORM_HEADERS)
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.post(url, content=body, headers=FORM_HEADERS)
        except httpx.HTTPError as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise RequestFailedError(f"Request to {url} failed: {e}") from e

    def _parse_response(
        self, response: httpx.Response, response_model: type[ResponseT]
    ) -> ResponseT:
        """Parse a response body into ``response_model`` or raise the error it carries.

        Raises:
            AcquireTokenFailedError: If the authority returned a structured error
            InvalidResponseError: If the body is not the expected JSON shape
        """
        status_code = response.status_code

        if response.is_success:
            try:
                return response_model.model_validate_json(response.content)
            except ValidationError as e:
                logger.error(
                    f"Invalid {response_model.__name__} in response (status={status_code}): "
                    f"{e.error_count()} validation error(s)"
                )
                raise InvalidResponseError(
                    f"Failed parsing {response_model.__name__}: {e}", status_code=status_code
                ) from e

        try:
            error_response = ErrorResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Unparseable error response (status={status_code})")
            raise InvalidResponseError(
                f"Failed parsing error response (HTTP {status_code}): {e}",
                status_code=status_code,
            ) from e

        logger.warning(
            f"Authority returned {error_response.error} (status={status_code}, "
            f"codes={error_response.error_codes}, correlation_id={error_response.correlation_id})"
        )
        raise AcquireTokenFailedError(error_response, status_code=status_code)

    async def request(
        self, url: str, params: FormParams, response_model: type[ResponseT]
    ) -> ResponseT:
        """POST ``params`` to ``url`` and parse the response as ``response_model``.

        Args:
            url: Endpoint URL
            params: Ordered form parameters
            response_model: Model expected on success

        Returns:
            Validated response model

        Raises:
            RequestFailedError: Transport failure before any response
            AcquireTokenFailedError: Structured error from the authority
            InvalidResponseError: Body not parseable as expected or error JSON
        """
        response = await self._post(url, params)
        return self._parse_response(response, response_model)
