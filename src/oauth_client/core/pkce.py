"""PKCE (RFC 7636) helpers."""

import base64
import hashlib
import secrets
from typing import Tuple

from oauth_client.exceptions import ConfigurationError

SUPPORTED_METHODS = ("S256", "plain")


def generate_code_verifier() -> str:
    """Random verifier, 86 characters from the unreserved set"""
    return secrets.token_urlsafe(64)


def derive_code_challenge(verifier: str, method: str = "S256") -> str:
    if method == "S256":
        digest = hashlib.sha256(verifier.encode("ascii")).digest()
        return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
    if method == "plain":
        return verifier
    raise ConfigurationError(f"Unsupported code_challenge_method: {method}")


def generate_pkce_pair(method: str = "S256") -> Tuple[str, str]:
    """Return (code_verifier, code_challenge)"""
    verifier = generate_code_verifier()
    return verifier, derive_code_challenge(verifier, method)
