import logging
from dataclasses import dataclass
from typing import Any, ClassVar

import httpx
from pydantic import ValidationError

from .exceptions import TokenExchangeError
from .models.oauth_token_response import (
    OAuth2TokenEndpointResponse,
    TokenErrorResponse,
    TokenResponse,
    TokenSet,
)
from .utils._http import DEFAULT_TIMEOUT, send_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientCredentials:
    client_id: str
    client_secret: str
    redirect_uri: str


class TokenExchangeClient:
    token_endpoint: ClassVar[str] = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.http_client = http_client
        self.timeout = timeout

    def build_token_exchange_params(
        self,
        code: str,
        credentials: ClientCredentials,
        code_verifier: str | None = None,
    ) -> dict[str, str]:
        params = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": credentials.redirect_uri,
            "client_id": credentials.client_id,
            "client_secret": credentials.client_secret,
        }

        if code_verifier:
            params["code_verifier"] = code_verifier

        return params

    def build_refresh_params(
        self, refresh_token: str, credentials: ClientCredentials
    ) -> dict[str, str]:
        return {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": credentials.client_id,
            "client_secret": credentials.client_secret,
        }

    async def send_token_request(self, data: dict[str, Any]) -> httpx.Response:
        try:
            return await send_request(
                "POST",
                self.token_endpoint,
                client=self.http_client,
                timeout=self.timeout,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                data=data,
            )
        except httpx.RequestError as e:
            logger.error(f"Failed to reach token endpoint: {str(e)}")

            raise TokenExchangeError(
                "request_failed", "Failed to reach the token endpoint"
            ) from e

    def parse_token_response(self, response: httpx.Response) -> TokenSet:
        """Turn a token endpoint response into a TokenSet or raise.

        A 200 without an access token is rejected as well; the provider
        contract says it never happens, so such a response is malformed.
        """
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            try:
                error = TokenErrorResponse.model_validate(payload)
            except ValidationError:
                logger.error(f"Token request failed with status {response.status_code}")

                raise TokenExchangeError(
                    "server_error",
                    f"Token request failed with status {response.status_code}",
                    status_code=response.status_code,
                )

            logger.warning(f"Token request rejected: {error.error}")

            raise TokenExchangeError(
                error.error,
                error.error_description,
                status_code=response.status_code,
            )

        if not isinstance(payload, dict) or not payload.get("access_token"):
            if isinstance(payload, dict) and payload.get("error"):
                logger.warning(f"Token request rejected: {payload['error']}")

                raise TokenExchangeError(
                    str(payload["error"]),
                    payload.get("error_description"),
                    status_code=response.status_code,
                )

            logger.error("No access token received from token endpoint")

            raise TokenExchangeError(
                "invalid_response",
                "No access token received",
                status_code=response.status_code,
            )

        try:
            token_response = OAuth2TokenEndpointResponse.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Failed to parse token response: {str(e)}")

            raise TokenExchangeError(
                "invalid_response",
                "Failed to parse token response",
                status_code=response.status_code,
            ) from e

        if token_response.is_error():
            assert isinstance(token_response.root, TokenErrorResponse)

            raise TokenExchangeError(
                token_response.root.error,
                token_response.root.error_description,
                status_code=response.status_code,
            )

        assert isinstance(token_response.root, TokenResponse)

        return token_response.root.to_token_set()

    async def exchange_code(
        self,
        code: str,
        credentials: ClientCredentials,
        code_verifier: str | None = None,
    ) -> TokenSet:
        """Exchange an authorization code for tokens.

        Codes are single-use; replaying one fails upstream with
        `invalid_grant`, which is raised unchanged.

        Raises:
            TokenExchangeError: If the provider rejects the code or sends an
                unusable response.
            UpstreamTimeoutError: If the token endpoint does not answer in time.
        """
        params = self.build_token_exchange_params(code, credentials, code_verifier)

        response = await self.send_token_request(params)

        return self.parse_token_response(response)

    async def refresh(
        self, refresh_token: str, credentials: ClientCredentials
    ) -> TokenSet:
        """Get a new access token.

        The result only carries a refresh token when the provider rotated it;
        see `TokenSet.merge_refreshed`.
        """
        params = self.build_refresh_params(refresh_token, credentials)

        response = await self.send_token_request(params)

        return self.parse_token_response(response)
