import base64
import secrets

STATE_ENTROPY_BYTES = 32


def generate_state() -> str:
    """Generate an unguessable CSRF state value (URL-safe, no padding)."""
    return (
        base64.urlsafe_b64encode(secrets.token_bytes(STATE_ENTROPY_BYTES))
        .rstrip(b"=")
        .decode("ascii")
    )


def validate_state(expected: str | None, received: str | None) -> bool:
    if not expected or not received:
        return False

    if not isinstance(expected, str) or not isinstance(received, str):
        return False

    return secrets.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))
