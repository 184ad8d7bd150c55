"""Authorization request parameters.

Builds the query parameters of an authorization request from caller options,
the client identity and the provider descriptor.

Rules:
- state is generated unless supplied
- OIDC providers always get a fresh nonce from a CSPRNG
- optional OIDC/PKCE parameters that are empty become None (omitted)
- a code_challenge never goes out without a code_challenge_method
- scopes: provider defaults, then client scopes, then caller scopes, de-duplicated
"""

import logging
import secrets
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from oauth_client.domain.models import AuthorizationRequestParameters, ClientIdentity
from oauth_client.exceptions import ConfigurationError
from oauth_client.providers.descriptor import ProviderDescriptor

logger = logging.getLogger(__name__)

OPTIONAL_PARAMETERS = (
    "code_challenge",
    "code_challenge_method",
    "prompt",
    "id_token_hint",
    "max_age",
    "claims",
    "ui_locales",
)

# Never copied from options into the authorization URL
PRIVATE_OPTIONS = ("client_secret", "code", "code_verifier", "refresh_token", "password")


def is_empty(value: Any) -> bool:
    """None, "" and empty collections are empty; 0 and False are values"""
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, set, dict)):
        return len(value) == 0
    return False


def generate_state() -> str:
    return secrets.token_hex(16)


def generate_nonce() -> str:
    return secrets.token_urlsafe(32)


def split_scopes(scopes: Any, separator: str = " ") -> List[str]:
    """Accept a scope list or a delimited scope string"""
    if is_empty(scopes):
        return []
    if isinstance(scopes, str):
        parts = scopes.split(separator) if separator.strip() else scopes.split()
        return [part.strip() for part in parts if part.strip()]
    return [str(scope) for scope in scopes if not is_empty(scope)]


def merge_scopes(*groups: Iterable[str]) -> List[str]:
    """Concatenate scope groups keeping the first occurrence of each scope"""
    merged: List[str] = []
    seen = set()
    for group in groups:
        for scope in group:
            if scope not in seen:
                seen.add(scope)
                merged.append(scope)
    return merged


class ParameterBuilder:
    """Builds AuthorizationRequestParameters for one provider.

    Holds only immutable configuration; every call works on its own copy of
    the options and identity.
    """

    def __init__(self, descriptor: ProviderDescriptor, scopes: Optional[Sequence[str]] = None):
        self.descriptor = descriptor
        self.scopes = tuple(scopes or ())

    def build(
        self,
        options: Optional[Mapping[str, Any]],
        identity: ClientIdentity,
    ) -> AuthorizationRequestParameters:
        """Build the authorization parameters for one request.

        Args:
            options: Caller options (state, scope, prompt, code_challenge, ...)
            identity: Configured client identity; client_id/redirect_uri in
                options take precedence for this call only

        Returns:
            Parameter mapping, omitted parameters set to None

        Raises:
            ConfigurationError: If no client_id is available
        """
        options = dict(options or {})
        identity = identity.with_overrides(options)
        if not identity.client_id:
            raise ConfigurationError("client_id is required to build an authorization request")

        params: AuthorizationRequestParameters = {
            "response_type": options.get("response_type") or "code",
            "client_id": identity.client_id,
            "redirect_uri": identity.redirect_uri,
            "state": options.get("state") or generate_state(),
            "scope": merge_scopes(
                self.descriptor.default_scopes,
                self.scopes,
                split_scopes(options.get("scope"), self.descriptor.scope_separator),
            ),
        }

        for key, value in self.descriptor.authorization_defaults.items():
            params[key] = value if is_empty(options.get(key)) else options[key]

        if self.descriptor.openid_connect:
            params["nonce"] = generate_nonce()
        else:
            params["nonce"] = None if is_empty(options.get("nonce")) else options["nonce"]

        for key in OPTIONAL_PARAMETERS:
            value = options.get(key)
            params[key] = None if is_empty(value) else value

        if params["code_challenge"] is None:
            params["code_challenge_method"] = None
        elif params["code_challenge_method"] is None:
            params["code_challenge_method"] = self.descriptor.pkce_method

        handled = set(params) | {"client_id", "redirect_uri"} | set(PRIVATE_OPTIONS)
        for key, value in options.items():
            if key not in handled:
                params[key] = None if is_empty(value) else value

        logger.debug(
            f"Built authorization parameters for {self.descriptor.name}: "
            f"client_id={identity.client_id}, scopes={params['scope']}"
        )
        return params
