import logging
from datetime import datetime, timezone

from pydantic import AwareDatetime, BaseModel, Field, ValidationError

from ._authorization import AuthorizationUrlBuilder
from ._config import OAuthConfig
from ._storage import SessionStateStore
from ._token_exchange import TokenExchangeClient
from .exceptions import (
    AuthenticationRequiredError,
    CsrfValidationError,
    TokenExchangeError,
)
from .models.oauth_token_response import TokenSet
from .utils._pkce import generate_pkce
from .utils._state import generate_state, validate_state

logger = logging.getLogger(__name__)


class LoginAttempt(BaseModel):
    state: str
    code_verifier: str | None = None  # PKCE verifier for the provider flow
    created_at: AwareDatetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)
    )


def login_key(session_id: str) -> str:
    return f"oauth:login:{session_id}"


def tokens_key(session_id: str) -> str:
    return f"oauth:tokens:{session_id}"


class AuthorizationFlow:
    """Drives one browser session through login, callback and token refresh.

    The login attempt is keyed by the browser session id, and is consumed
    by the first callback that reaches it, whatever the outcome.
    """

    def __init__(
        self,
        config: OAuthConfig,
        store: SessionStateStore,
        token_client: TokenExchangeClient | None = None,
        url_builder: AuthorizationUrlBuilder | None = None,
    ):
        self.config = config
        self.store = store
        self.token_client = token_client or TokenExchangeClient(
            timeout=config.http_timeout
        )
        self.url_builder = url_builder or AuthorizationUrlBuilder()

    def begin(self, session_id: str, login_hint: str | None = None) -> str:
        """Store a fresh login attempt and return the URL to send the user to."""
        state = generate_state()
        pkce = generate_pkce() if self.config.use_pkce else None

        url = self.url_builder.for_login(
            self.config, state, pkce=pkce, login_hint=login_hint
        )

        attempt = LoginAttempt(
            state=state,
            code_verifier=pkce.code_verifier if pkce else None,
        )

        self.store.set(
            login_key(session_id), attempt.model_dump_json(), ttl=self.config.state_ttl
        )

        return url

    def _consume_attempt(self, session_id: str, state: str | None) -> LoginAttempt:
        raw_attempt = self.store.pop(login_key(session_id))

        if raw_attempt is None:
            logger.error("No login attempt found for this session")
            raise CsrfValidationError("No login in progress for this session")

        try:
            attempt = LoginAttempt.model_validate_json(raw_attempt)
        except ValidationError as e:
            logger.error("Invalid login attempt data", exc_info=e)
            raise CsrfValidationError("Invalid login attempt data") from e

        if not validate_state(attempt.state, state):
            logger.error("State mismatch in OAuth callback")
            raise CsrfValidationError("State does not match")

        return attempt

    async def complete(
        self, session_id: str, state: str | None, code: str | None
    ) -> TokenSet:
        """Validate the callback and exchange the code.

        The state is checked before the token endpoint is contacted.

        Raises:
            CsrfValidationError: If the stored attempt is missing or the state
                does not match.
            TokenExchangeError: If there is no code or the provider rejects it.
        """
        attempt = self._consume_attempt(session_id, state)

        if not code:
            logger.error("No authorization code received in callback")
            raise TokenExchangeError(
                "invalid_request", "No authorization code received in callback"
            )

        tokens = await self.token_client.exchange_code(
            code, self.config.credentials, attempt.code_verifier
        )

        self.save_tokens(session_id, tokens)

        return tokens

    def cancel(self, session_id: str) -> None:
        """Drop a pending login attempt, e.g. after the user denied consent."""
        self.store.delete(login_key(session_id))

    def save_tokens(self, session_id: str, tokens: TokenSet) -> None:
        self.store.set(tokens_key(session_id), tokens.model_dump_json())

    def get_tokens(self, session_id: str) -> TokenSet | None:
        raw_tokens = self.store.get(tokens_key(session_id))

        if raw_tokens is None:
            return None

        try:
            return TokenSet.model_validate_json(raw_tokens)
        except ValidationError as e:
            logger.error("Invalid stored tokens, discarding them", exc_info=e)
            self.store.delete(tokens_key(session_id))

            return None

    async def get_access_token(self, session_id: str) -> str:
        """Return a usable access token, refreshing it when it has expired."""
        tokens = self.get_tokens(session_id)

        if tokens is None:
            raise AuthenticationRequiredError()

        if not tokens.is_expired():
            return tokens.access_token

        if not tokens.refresh_token:
            logger.info("Access token expired and no refresh token is stored")
            raise AuthenticationRequiredError("Access token expired")

        refreshed = await self.token_client.refresh(
            tokens.refresh_token, self.config.credentials
        )
        tokens = tokens.merge_refreshed(refreshed)

        self.save_tokens(session_id, tokens)

        return tokens.access_token

    def logout(self, session_id: str) -> None:
        self.store.delete(tokens_key(session_id))
        self.store.delete(login_key(session_id))
