from urllib.parse import parse_qs, urlparse

import pytest

from picker_auth._authorization import AuthorizationUrlBuilder
from picker_auth._config import PHOTOS_PICKER_SCOPE, OAuthConfig
from picker_auth.exceptions import ConfigurationError
from picker_auth.models.authorization_request import AuthorizationRequest
from picker_auth.utils._pkce import generate_pkce


def make_request(**overrides) -> AuthorizationRequest:
    return AuthorizationRequest(
        **{
            "client_id": "test_client_id",
            "redirect_uri": "http://localhost:8000/auth/callback",
            "scope": PHOTOS_PICKER_SCOPE,
            **overrides,
        }
    )


def query_of(url: str) -> dict[str, list[str]]:
    return parse_qs(urlparse(url).query)


def test_builds_url_with_required_parameters():
    url = AuthorizationUrlBuilder().build(make_request())

    assert url.startswith("https://accounts.google.com/o/oauth2/v2/auth?")

    query = query_of(url)

    assert query == {
        "client_id": ["test_client_id"],
        "redirect_uri": ["http://localhost:8000/auth/callback"],
        "response_type": ["code"],
        "scope": [PHOTOS_PICKER_SCOPE],
        "access_type": ["offline"],
    }


@pytest.mark.parametrize("state", [None, "some-state"])
def test_state_is_present_iff_provided(state):
    query = query_of(AuthorizationUrlBuilder().build(make_request(state=state)))

    for name in ("client_id", "redirect_uri", "response_type", "scope", "access_type"):
        assert len(query[name]) == 1

    if state:
        assert query["state"] == [state]
    else:
        assert "state" not in query


def test_forced_consent():
    query = query_of(AuthorizationUrlBuilder().build(make_request(prompt="consent")))

    assert query["prompt"] == ["consent"]


def test_pkce_parameters():
    pkce = generate_pkce()

    query = query_of(
        AuthorizationUrlBuilder().build(make_request(code_challenge=pkce.code_challenge))
    )

    assert query["code_challenge"] == [pkce.code_challenge]
    assert query["code_challenge_method"] == ["S256"]


def test_build_is_deterministic():
    request = make_request(state="abc", prompt="consent", code_challenge="xyz")
    builder = AuthorizationUrlBuilder()

    assert builder.build(request) == builder.build(request)


@pytest.mark.parametrize("field", ["client_id", "redirect_uri"])
def test_missing_client_settings_are_configuration_errors(field):
    with pytest.raises(ConfigurationError) as exc_info:
        AuthorizationUrlBuilder().build(make_request(**{field: ""}))

    assert exc_info.value.error == "configuration_error"
    assert field in str(exc_info.value)


def test_for_login_uses_config(config: OAuthConfig):
    pkce = generate_pkce()

    query = query_of(
        AuthorizationUrlBuilder().for_login(config, "the-state", pkce=pkce)
    )

    assert query["client_id"] == ["test_client_id"]
    assert query["state"] == ["the-state"]
    assert query["prompt"] == ["consent"]
    assert query["code_challenge"] == [pkce.code_challenge]
    assert "login_hint" not in query


def test_for_login_without_consent_or_pkce(config: OAuthConfig):
    config = config.model_copy(update={"force_consent": False})

    query = query_of(
        AuthorizationUrlBuilder().for_login(
            config, "the-state", login_hint="user@example.com"
        )
    )

    assert "prompt" not in query
    assert "code_challenge" not in query
    assert query["login_hint"] == ["user@example.com"]
