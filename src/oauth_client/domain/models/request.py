"""Authorization Request Models

Key Components:
- ClientIdentity: client_id / client_secret / redirect_uri, immutable
- AuthorizationRequest: URL plus the generated values the caller must keep
  (state, nonce, PKCE verifier) to finish the flow
- AuthorizationRequestParameters: parameter name -> value (None = omitted)
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

AuthorizationRequestParameters = Dict[str, Any]


@dataclass(frozen=True)
class ClientIdentity:
    """OAuth client credentials registered with the provider

    Per-call overrides return a new instance; the configured identity of a
    client is never modified, so one client can serve concurrent flows.
    """
    client_id: Optional[str] = None
    client_secret: Optional[str] = field(default=None, repr=False)
    redirect_uri: Optional[str] = None

    def with_overrides(self, options: Mapping[str, Any]) -> 'ClientIdentity':
        """Return a copy using any client_id/client_secret/redirect_uri in options"""
        overrides = {
            key: options[key]
            for key in ("client_id", "client_secret", "redirect_uri")
            if options.get(key)
        }
        if not overrides:
            return self
        return replace(self, **overrides)


@dataclass(frozen=True)
class AuthorizationRequest:
    """A built authorization request

    Attributes:
        url: Where to redirect the user agent
        state: CSRF state, compare with the callback's state
        nonce: OIDC nonce, compare with the id_token nonce claim
        code_verifier: PKCE verifier to send with the token request
        parameters: The full parameter set used to build the URL
    """
    url: str
    state: str
    nonce: Optional[str] = None
    code_verifier: Optional[str] = None
    parameters: AuthorizationRequestParameters = field(default_factory=dict)
