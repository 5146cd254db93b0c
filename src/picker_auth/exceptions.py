class PickerAuthException(Exception):
    http_status: int = 500

    def __init__(self, error: str, error_description: str | None = None) -> None:
        super().__init__(
            f"{error}: {error_description}" if error_description else error
        )
        self.error = error
        self.error_description = error_description


class ConfigurationError(PickerAuthException):
    """Missing or invalid client credentials, redirect URI or session secret."""

    def __init__(self, error_description: str) -> None:
        super().__init__("configuration_error", error_description)


class CsrfValidationError(PickerAuthException):
    """The callback state is missing, unknown or does not match.

    The login flow has to be restarted.
    """

    http_status = 400

    def __init__(self, error_description: str) -> None:
        super().__init__("invalid_state", error_description)


class AuthenticationRequiredError(PickerAuthException):
    http_status = 401

    def __init__(self, error_description: str = "Not authenticated") -> None:
        super().__init__("unauthorized", error_description)


class TokenExchangeError(PickerAuthException):
    """The token endpoint rejected the grant or sent an unusable response.

    `error` carries the upstream OAuth error code (e.g. `invalid_grant`)
    when the provider sent one.
    """

    http_status = 400

    def __init__(
        self,
        error: str,
        error_description: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(error, error_description)
        self.status_code = status_code


class UpstreamTimeoutError(PickerAuthException):
    """The provider did not answer in time. Safe to retry with backoff."""

    http_status = 504

    def __init__(self, error_description: str = "Upstream request timed out") -> None:
        super().__init__("upstream_timeout", error_description)


class PickerSessionError(PickerAuthException):
    http_status = 502
    default_error = "picker_error"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(self.default_error, message)
        self.message = message
        self.status_code = status_code
        self.code = code


class AuthError(PickerSessionError):
    http_status = 401
    default_error = "unauthenticated"


class PreconditionError(PickerSessionError):
    http_status = 412
    default_error = "failed_precondition"


class QuotaError(PickerSessionError):
    http_status = 429
    default_error = "resource_exhausted"


class UpstreamError(PickerSessionError):
    http_status = 502
    default_error = "upstream_error"
