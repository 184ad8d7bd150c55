"""OAuth2 grant types.

A Grant names a flow variant and turns (default params, options) into the
token request body. Built-in grants are looked up by name; custom grants can
be passed as Grant instances.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple, Union

from oauth_client.exceptions import ConfigurationError


@dataclass(frozen=True)
class Grant:
    """Token grant

    Attributes:
        name: grant_type value sent to the token endpoint
        required_parameters: Body fields that must be non-empty
        identity_parameters: Client identity fields the grant sends
    """
    name: str
    required_parameters: Tuple[str, ...] = ()
    identity_parameters: Tuple[str, ...] = ("client_id", "client_secret")

    def prepare_request_parameters(
        self, defaults: Mapping[str, Any], options: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Merge defaults and options into the request body.

        Options win over defaults; None values are dropped.

        Raises:
            ConfigurationError: If a required parameter is missing
        """
        params = {key: value for key, value in defaults.items() if value is not None}
        params.update({key: value for key, value in options.items() if value is not None})
        params["grant_type"] = self.name

        missing = [key for key in self.required_parameters if not params.get(key)]
        if missing:
            raise ConfigurationError(
                f"Required parameter not passed for {self.name} grant: {', '.join(missing)}"
            )
        return params

    def __str__(self) -> str:
        return self.name


AUTHORIZATION_CODE = Grant(
    "authorization_code", ("code",), ("client_id", "client_secret", "redirect_uri")
)
REFRESH_TOKEN = Grant("refresh_token", ("refresh_token",))
CLIENT_CREDENTIALS = Grant("client_credentials")
PASSWORD = Grant("password", ("username", "password"))

_GRANTS: Dict[str, Grant] = {
    grant.name: grant
    for grant in (AUTHORIZATION_CODE, REFRESH_TOKEN, CLIENT_CREDENTIALS, PASSWORD)
}


def resolve_grant(grant: Union[str, Grant]) -> Grant:
    """Return the Grant for a name, or the grant itself"""
    if isinstance(grant, Grant):
        return grant
    key = (grant or "").strip().lower()
    if key not in _GRANTS:
        raise ConfigurationError(f"Unsupported grant type: {grant}")
    return _GRANTS[key]
