"""OAuth client error taxonomy.

Every failure raised by the engine derives from OAuthClientError so callers
can catch the whole family in one place. Nothing here is retried internally.
"""

from typing import Any, Optional


class OAuthClientError(Exception):
    """Base class for all OAuth client errors."""
    pass


class ConfigurationError(OAuthClientError):
    """Required client configuration (e.g. client_id) is missing or invalid."""
    pass


class ProtocolError(OAuthClientError):
    """Provider returned a body that is not structured data."""
    pass


class MalformedResponseError(OAuthClientError):
    """Success-shaped response is missing a required field."""
    pass


class NonceMismatchError(OAuthClientError):
    """ID token nonce does not match the one sent in the authorization request."""
    pass


class IdentityProviderError(OAuthClientError):
    """Provider reported an application-level error (invalid_grant, ...).

    Attributes:
        message: Human readable error from the provider
        code: Provider error code (0 when the provider sends none)
        response: Full parsed response body, for diagnostics
    """

    def __init__(self, message: str, code: int = 0, response: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.response = response

    def __repr__(self) -> str:
        return f"IdentityProviderError(message={self.message!r}, code={self.code})"


class TransportError(OAuthClientError):
    """Network, TLS or connection failure from the transport."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class TransportTimeoutError(TransportError):
    """Transport gave up waiting for the provider."""
    pass
