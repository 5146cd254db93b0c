from datetime import datetime, timedelta, timezone

from pydantic import AwareDatetime, BaseModel, Field, RootModel

# Used when the token endpoint omits expires_in.
DEFAULT_EXPIRES_IN = 3600


class TokenResponse(BaseModel):
    token_type: str = Field(
        "Bearer", description="The type of token, usually 'Bearer'"
    )

    access_token: str = Field(description="The issued access token")
    expires_in: int | None = Field(
        None, description="Lifetime of the access token in seconds"
    )
    refresh_token: str | None = Field(
        None, description="Token used to obtain new access tokens"
    )
    scope: str | None = Field(
        None,
        description="Space-delimited list of scopes associated with the access token",
    )
    id_token: str | None = Field(
        None,
        description="OpenID Connect ID token returned alongside access token",
    )

    @property
    def access_token_expires_at(self) -> datetime:
        expires_in = self.expires_in

        if expires_in is None:
            expires_in = DEFAULT_EXPIRES_IN

        return datetime.now(tz=timezone.utc) + timedelta(seconds=expires_in)

    def to_token_set(self) -> "TokenSet":
        return TokenSet(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            token_type=self.token_type or "Bearer",
            expires_at=self.access_token_expires_at,
            scope=self.scope,
        )


class TokenErrorResponse(BaseModel):
    error: str = Field(description="Error code as per OAuth 2.0 specification")
    error_description: str | None = Field(
        None, description="Human-readable explanation of the error"
    )
    error_uri: str | None = Field(
        None, description="URI to a web page with more information about the error"
    )


class OAuth2TokenEndpointResponse(RootModel):
    root: TokenErrorResponse | TokenResponse

    def is_error(self) -> bool:
        return isinstance(self.root, TokenErrorResponse)


class TokenSet(BaseModel):
    """Tokens persisted server-side for one browser session."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_at: AwareDatetime
    scope: str | None = None

    def is_expired(self, leeway: timedelta = timedelta(seconds=60)) -> bool:
        return datetime.now(tz=timezone.utc) + leeway >= self.expires_at

    def merge_refreshed(self, refreshed: "TokenSet") -> "TokenSet":
        """Combine a refresh result with this set.

        Providers may omit the refresh token on refresh; the existing one
        stays valid until a new one is issued.
        """
        if refreshed.refresh_token:
            return refreshed

        return refreshed.model_copy(update={"refresh_token": self.refresh_token})
