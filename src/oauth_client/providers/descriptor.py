"""Provider descriptor.

A provider is plain configuration handed to the engine: endpoints, default
scopes, scope separator, parameter defaults and, if needed, its own error
rule. Adding a provider means building a new descriptor, not changing the
engine.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Sequence

from oauth_client.core.validator import ErrorRule
from oauth_client.domain.models import AccessToken, ResourceOwner

TOKEN_REQUEST_FORMATS = ("form", "json")
TOKEN_AUTH_METHODS = ("client_secret_post", "client_secret_basic")


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static description of an OAuth2/OIDC provider.

    Attributes:
        name: Registry key (e.g. "ozwillo")
        authorization_endpoint: Base authorization URL
        token_endpoint: Token URL
        resource_owner_endpoint: Userinfo URL; may reference ``{access_token}``
            or ``{resource_owner_id}``
        deprovision_endpoint: Optional URL template with ``{instance_id}``
        default_scopes: Scopes always requested, in order ("openid" first for OIDC)
        scope_separator: Separator used when serializing scopes
        authorization_defaults: Parameters added to every authorization
            request unless the caller sets them
        pkce_method: Method assumed when only a code_challenge is given
        openid_connect: Whether a nonce is generated for authorization requests
        token_request_format: "form" or "json" token request body
        token_auth_method: "client_secret_post" or "client_secret_basic"
        resource_owner_id_key: Token response field holding the owner id
        error_rule: Replacement for the default error extraction rule
        resource_owner_factory: Builds the resource owner from userinfo data
    """
    name: str
    authorization_endpoint: str
    token_endpoint: str
    resource_owner_endpoint: str
    deprovision_endpoint: Optional[str] = None
    default_scopes: Sequence[str] = ()
    scope_separator: str = " "
    authorization_defaults: Mapping[str, Any] = field(default_factory=dict)
    pkce_method: str = "S256"
    openid_connect: bool = True
    token_request_format: str = "form"
    token_auth_method: str = "client_secret_post"
    resource_owner_id_key: Optional[str] = None
    error_rule: Optional[ErrorRule] = None
    resource_owner_factory: Callable[[Mapping[str, Any]], Any] = ResourceOwner.from_response

    def __post_init__(self):
        if self.token_request_format not in TOKEN_REQUEST_FORMATS:
            raise ValueError(f"Unknown token request format: {self.token_request_format}")
        if self.token_auth_method not in TOKEN_AUTH_METHODS:
            raise ValueError(f"Unknown token auth method: {self.token_auth_method}")
        object.__setattr__(self, "default_scopes", tuple(self.default_scopes))
        object.__setattr__(
            self, "authorization_defaults", MappingProxyType(dict(self.authorization_defaults))
        )

    def get_authorization_url(self) -> str:
        return self.authorization_endpoint

    def get_token_url(self, params: Optional[Mapping[str, Any]] = None) -> str:
        return self.token_endpoint

    def get_resource_owner_url(self, token: AccessToken) -> str:
        return self.resource_owner_endpoint.format(
            access_token=token.token,
            resource_owner_id=token.resource_owner_id or "",
        )

    def get_deprovision_url(self, instance_id: str) -> Optional[str]:
        if not self.deprovision_endpoint:
            return None
        return self.deprovision_endpoint.format(instance_id=instance_id)
