"""Ozwillo OAuth2/OpenID Connect client.

A provider-agnostic authorization-code engine plus the Ozwillo provider
descriptor.
"""

from oauth_client.core.client import OAuth2Client
from oauth_client.domain.models import AccessToken, AuthorizationRequest, ClientIdentity
from oauth_client.exceptions import (
    ConfigurationError,
    IdentityProviderError,
    MalformedResponseError,
    NonceMismatchError,
    OAuthClientError,
    ProtocolError,
    TransportError,
    TransportTimeoutError,
)
from oauth_client.infrastructure.http import HttpResponse, HttpxTransport
from oauth_client.providers import OZWILLO, OzwilloUser, ProviderDescriptor

__version__ = "1.0.0"

__all__ = [
    "OAuth2Client",
    "AccessToken",
    "AuthorizationRequest",
    "ClientIdentity",
    "ProviderDescriptor",
    "OZWILLO",
    "OzwilloUser",
    "HttpResponse",
    "HttpxTransport",
    "OAuthClientError",
    "ConfigurationError",
    "IdentityProviderError",
    "MalformedResponseError",
    "NonceMismatchError",
    "ProtocolError",
    "TransportError",
    "TransportTimeoutError",
]
