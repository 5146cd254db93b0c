from datetime import datetime, timedelta, timezone

import pytest

from picker_auth._config import OAuthConfig
from picker_auth._flow import AuthorizationFlow, tokens_key
from picker_auth._picker import PickerSessionManager
from picker_auth._storage import MemoryStateStore
from picker_auth._token_exchange import ClientCredentials, TokenExchangeClient
from picker_auth.models.oauth_token_response import TokenSet

TEST_SESSION_SECRET = "test-session-secret-that-is-long-enough"


@pytest.fixture
def config() -> OAuthConfig:
    return OAuthConfig.load(
        client_id="test_client_id",
        client_secret="test_client_secret",
        redirect_uri="http://localhost:8000/auth/callback",
        session_secret=TEST_SESSION_SECRET,
        cookie_secure=False,
        post_login_redirect="/photos",
        _env_file=None,
    )


@pytest.fixture
def credentials(config: OAuthConfig) -> ClientCredentials:
    return config.credentials


@pytest.fixture
def store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def token_client() -> TokenExchangeClient:
    return TokenExchangeClient(timeout=5.0)


@pytest.fixture
def picker() -> PickerSessionManager:
    return PickerSessionManager(timeout=5.0)


@pytest.fixture
def flow(
    config: OAuthConfig, store: MemoryStateStore, token_client: TokenExchangeClient
) -> AuthorizationFlow:
    return AuthorizationFlow(config, store, token_client=token_client)


@pytest.fixture
def stored_tokens(store: MemoryStateStore) -> TokenSet:
    """A valid token set stored for browser session "browser-session"."""
    tokens = TokenSet(
        access_token="stored_access_token",
        refresh_token="stored_refresh_token",
        expires_at=datetime.now(tz=timezone.utc) + timedelta(hours=1),
        scope="https://www.googleapis.com/auth/photospicker.mediaitems.readonly",
    )
    store.set(tokens_key("browser-session"), tokens.model_dump_json())

    return tokens


@pytest.fixture
def expired_tokens(store: MemoryStateStore) -> TokenSet:
    tokens = TokenSet(
        access_token="expired_access_token",
        refresh_token="stored_refresh_token",
        expires_at=datetime.now(tz=timezone.utc) - timedelta(minutes=5),
    )
    store.set(tokens_key("browser-session"), tokens.model_dump_json())

    return tokens
