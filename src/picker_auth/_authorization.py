from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar
from urllib.parse import urlencode

from .exceptions import ConfigurationError
from .models.authorization_request import AuthorizationRequest, PkceParameters

if TYPE_CHECKING:
    from ._config import OAuthConfig

logger = logging.getLogger(__name__)


class AuthorizationUrlBuilder:
    authorization_endpoint: ClassVar[str] = (
        "https://accounts.google.com/o/oauth2/v2/auth"
    )

    def get_redirect_params(self, request: AuthorizationRequest) -> dict[str, str]:
        """
        Generate the query parameters for the redirect to the authorization endpoint.
        """
        if not request.client_id:
            logger.error("Cannot build authorization URL without a client ID")
            raise ConfigurationError("client_id is required")

        if not request.redirect_uri:
            logger.error("Cannot build authorization URL without a redirect URI")
            raise ConfigurationError("redirect_uri is required")

        params = {
            "client_id": request.client_id,
            "redirect_uri": request.redirect_uri,
            "response_type": "code",
            "scope": request.scope,
            "access_type": request.access_type,
        }

        if request.state:
            params["state"] = request.state

        if request.prompt:
            params["prompt"] = request.prompt

        if request.code_challenge:
            params["code_challenge"] = request.code_challenge
            params["code_challenge_method"] = request.code_challenge_method or "S256"

        if request.login_hint:
            params["login_hint"] = request.login_hint

        return params

    def build(self, request: AuthorizationRequest) -> str:
        return f"{self.authorization_endpoint}?{urlencode(self.get_redirect_params(request))}"

    def for_login(
        self,
        config: OAuthConfig,
        state: str,
        pkce: PkceParameters | None = None,
        login_hint: str | None = None,
    ) -> str:
        request = AuthorizationRequest(
            client_id=config.client_id,
            redirect_uri=config.redirect_uri,
            scope=config.scope,
            state=state,
            code_challenge=pkce.code_challenge if pkce else None,
            code_challenge_method="S256" if pkce else None,
            prompt="consent" if config.force_consent else None,
            login_hint=login_hint,
        )

        return self.build(request)
