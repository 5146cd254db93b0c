"""Signed browser-session identifiers.

The cookie only carries a random session id; everything else lives in the
server-side state store. The signature stops clients from picking their own
ids.
"""

import hashlib
import hmac
import secrets


def _sign(secret: str, value: str) -> str:
    return hmac.new(
        secret.encode("utf-8"), value.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def sign_session_id(session_id: str, secret: str) -> str:
    return f"{session_id}.{_sign(secret, session_id)}"


def unsign_session_id(value: str | None, secret: str) -> str | None:
    """Return the session id if the signature matches, otherwise None."""
    if not value or "." not in value:
        return None

    session_id, signature = value.rsplit(".", 1)

    expected = _sign(secret, session_id)

    if not session_id or not hmac.compare_digest(
        signature.encode("utf-8"), expected.encode("utf-8")
    ):
        return None

    return session_id
