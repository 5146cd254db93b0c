from picker_auth._authorization import AuthorizationUrlBuilder
from picker_auth._config import PHOTOS_PICKER_SCOPE, OAuthConfig
from picker_auth._flow import AuthorizationFlow, LoginAttempt
from picker_auth._picker import PickerSessionManager
from picker_auth._storage import MemoryStateStore, SessionStateStore
from picker_auth._token_exchange import ClientCredentials, TokenExchangeClient
from picker_auth.models.authorization_request import (
    AuthorizationRequest,
    PkceParameters,
)
from picker_auth.models.oauth_token_response import TokenSet
from picker_auth.models.picker import (
    MediaItem,
    MediaItemsPage,
    PickerSession,
    PickerSessionState,
    PollingConfig,
)
from picker_auth.utils._pkce import calculate_s256_challenge, generate_pkce
from picker_auth.utils._state import generate_state, validate_state

__all__ = [
    "PHOTOS_PICKER_SCOPE",
    "AuthorizationFlow",
    "AuthorizationRequest",
    "AuthorizationUrlBuilder",
    "ClientCredentials",
    "LoginAttempt",
    "MediaItem",
    "MediaItemsPage",
    "MemoryStateStore",
    "OAuthConfig",
    "PickerSession",
    "PickerSessionManager",
    "PickerSessionState",
    "PkceParameters",
    "PollingConfig",
    "SessionStateStore",
    "TokenExchangeClient",
    "TokenSet",
    "calculate_s256_challenge",
    "generate_pkce",
    "generate_state",
    "validate_state",
]
