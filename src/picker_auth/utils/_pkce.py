import base64
import hashlib
import secrets

from ..models.authorization_request import PkceParameters

# 96 random bytes encode to exactly 128 base64url characters, the maximum
# verifier length allowed by RFC 7636.
VERIFIER_ENTROPY_BYTES = 96


def _b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def generate_code_verifier() -> str:
    """Generate a PKCE code verifier (43-128 characters)."""
    return _b64url(secrets.token_bytes(VERIFIER_ENTROPY_BYTES))


def calculate_s256_challenge(verifier: str) -> str:
    sha256_digest = hashlib.sha256(verifier.encode("ascii")).digest()

    return _b64url(sha256_digest)


def generate_pkce() -> PkceParameters:
    verifier = generate_code_verifier()

    return PkceParameters(
        code_verifier=verifier,
        code_challenge=calculate_s256_challenge(verifier),
    )

