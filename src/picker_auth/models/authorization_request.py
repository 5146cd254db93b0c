from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AuthorizationRequest(BaseModel):
    """Parameters of one redirect to the provider's authorization endpoint."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    redirect_uri: str
    scope: str
    state: str | None = None  # CSRF token, always set by the login flow
    code_challenge: str | None = None
    code_challenge_method: Literal["S256"] | None = None
    access_type: Literal["offline", "online"] = "offline"
    prompt: Literal["consent", "select_account", "none"] | None = None
    login_hint: str | None = None


class PkceParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    code_verifier: str = Field(min_length=43, max_length=128)
    code_challenge: str
