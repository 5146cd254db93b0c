from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from picker_auth._config import OAuthConfig
from picker_auth._storage import MemoryStateStore
from picker_auth.router import PickerRouter
from picker_auth.utils._signing import sign_session_id


@pytest.fixture
def test_app(config: OAuthConfig, store: MemoryStateStore) -> FastAPI:
    app = FastAPI()

    app.include_router(PickerRouter(config, store))

    return app


@pytest.fixture
def client(test_app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(test_app, follow_redirects=False) as c:
        yield c


@pytest.fixture
def authenticated_client(
    client: TestClient, config: OAuthConfig, stored_tokens
) -> TestClient:
    """Client whose cookie points at the tokens of "browser-session"."""
    client.cookies.set(
        config.cookie_name, sign_session_id("browser-session", config.session_secret)
    )

    return client
