"""Access token construction from a validated token response."""

import logging
import time
from typing import Any, Callable, Mapping, Optional, Union

from oauth_client.core.grants import Grant, resolve_grant
from oauth_client.domain.models import AccessToken
from oauth_client.exceptions import MalformedResponseError

logger = logging.getLogger(__name__)

RESERVED_FIELDS = ("access_token", "expires_in", "expires", "refresh_token", "resource_owner_id")


class TokenFactory:
    """Builds AccessToken values.

    Only ever called with responses that already passed ResponseValidator.
    """

    def __init__(
        self,
        resource_owner_id_key: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.resource_owner_id_key = resource_owner_id_key
        self.clock = clock

    def _expires(self, response: Mapping[str, Any]) -> Optional[int]:
        if response.get("expires_in") not in (None, ""):
            try:
                expires_in = int(float(response["expires_in"]))
            except (TypeError, ValueError, OverflowError) as e:
                raise MalformedResponseError(
                    f"expires_in value must be a finite number, got {response['expires_in']!r}"
                ) from e
            return int(self.clock()) + expires_in if expires_in else None

        if response.get("expires") not in (None, ""):
            try:
                return int(response["expires"])
            except (TypeError, ValueError, OverflowError) as e:
                raise MalformedResponseError(
                    f"expires value must be a finite number, got {response['expires']!r}"
                ) from e
        return None

    def create(self, response: Mapping[str, Any], grant: Union[str, Grant]) -> AccessToken:
        """Create an AccessToken.

        Raises:
            MalformedResponseError: access_token missing or expiry not numeric
        """
        grant = resolve_grant(grant)
        token = response.get("access_token")
        if not token:
            raise MalformedResponseError("Token response is missing required access_token")

        resource_owner_id = None
        if self.resource_owner_id_key and response.get(self.resource_owner_id_key) is not None:
            resource_owner_id = str(response[self.resource_owner_id_key])
        elif response.get("resource_owner_id") is not None:
            resource_owner_id = str(response["resource_owner_id"])

        values = {
            key: value for key, value in response.items()
            if key not in RESERVED_FIELDS and key != self.resource_owner_id_key
        }

        access_token = AccessToken(
            token=str(token),
            expires=self._expires(response),
            refresh_token=response.get("refresh_token") or None,
            resource_owner_id=resource_owner_id,
            values=values,
        )
        logger.info(f"Access token issued ({grant.name} grant, expires={access_token.expires})")
        return access_token
