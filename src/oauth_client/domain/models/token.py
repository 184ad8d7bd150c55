"""Access Token Model

Purpose: Immutable value object for tokens issued by a provider

Key Components:
- AccessToken: token string, expiry, refresh token, resource owner id and
  every other field the provider returned (the "values" bag)

Tokens are created by TokenFactory after the response was validated.
``to_dict``/``from_dict`` exist so callers can persist and rehydrate them.
"""

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from jose import jwt
from jose.exceptions import JWTError

from oauth_client.exceptions import MalformedResponseError


@dataclass(frozen=True)
class AccessToken:
    """Access token issued by the token endpoint

    Attributes:
        token: The access token string
        expires: Absolute expiry (epoch seconds), None if unknown
        refresh_token: Refresh token, if issued
        resource_owner_id: Resource owner identifier, if the provider returns one
        values: Any other field from the token response (token_type, id_token, ...)
    """
    token: str
    expires: Optional[int] = None
    refresh_token: Optional[str] = None
    resource_owner_id: Optional[str] = None
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __str__(self) -> str:
        return self.token

    @property
    def token_type(self) -> Optional[str]:
        return self.values.get("token_type")

    @property
    def id_token(self) -> Optional[str]:
        return self.values.get("id_token")

    @property
    def is_expired(self) -> bool:
        """Check if the token is past its expiry (False when expiry is unknown)"""
        if self.expires is None:
            return False
        return self.expires <= time.time()

    def id_token_claims(self) -> Dict[str, Any]:
        """Decode the id_token payload without verifying its signature.

        Raises:
            MalformedResponseError: If no id_token was issued or it is not a JWT
        """
        if not self.id_token:
            raise MalformedResponseError("Token response did not include an id_token")
        try:
            return jwt.get_unverified_claims(self.id_token)
        except JWTError as e:
            raise MalformedResponseError(f"id_token is not a valid JWT: {e}") from e

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        data = dict(self.values)
        data["access_token"] = self.token
        if self.expires is not None:
            data["expires"] = self.expires
        if self.refresh_token:
            data["refresh_token"] = self.refresh_token
        if self.resource_owner_id:
            data["resource_owner_id"] = self.resource_owner_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'AccessToken':
        """Create from dictionary produced by ``to_dict``"""
        values = {
            k: v for k, v in data.items()
            if k not in ("access_token", "expires", "refresh_token", "resource_owner_id")
        }
        expires = data.get("expires")
        return cls(
            token=data["access_token"],
            expires=int(expires) if expires is not None else None,
            refresh_token=data.get("refresh_token"),
            resource_owner_id=data.get("resource_owner_id"),
            values=values,
        )
