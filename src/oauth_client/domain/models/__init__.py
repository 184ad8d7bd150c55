"""Domain models for the OAuth client"""

from oauth_client.domain.models.request import (
    AuthorizationRequest,
    AuthorizationRequestParameters,
    ClientIdentity,
)
from oauth_client.domain.models.resource_owner import ResourceOwner
from oauth_client.domain.models.token import AccessToken

__all__ = [
    # Token models
    "AccessToken",
    # Request models
    "AuthorizationRequest",
    "AuthorizationRequestParameters",
    "ClientIdentity",
    # Resource owner
    "ResourceOwner",
]
