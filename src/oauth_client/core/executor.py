"""Token request execution.

Builds the token request for a grant, sends it once through the transport,
parses the body and runs the response validator. No retries: a failed
exchange is reported to the caller as is.
"""

import base64
import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, quote, urlencode

from oauth_client.core.grants import Grant, resolve_grant
from oauth_client.core.validator import ResponseValidator
from oauth_client.domain.models import ClientIdentity
from oauth_client.exceptions import ConfigurationError, ProtocolError
from oauth_client.infrastructure.http.transport import HttpResponse, Transport
from oauth_client.providers.descriptor import ProviderDescriptor

logger = logging.getLogger(__name__)

IDENTITY_KEYS = ("client_id", "client_secret", "redirect_uri")


def parse_response(response: HttpResponse) -> Any:
    """Parse a provider response body.

    Form-encoded bodies become a dict, JSON bodies are decoded, anything else
    is returned as text.

    Raises:
        ProtocolError: If a 500 response carries no decodable body
    """
    content = response.body or ""

    if "application/x-www-form-urlencoded" in response.content_type:
        return dict(parse_qsl(content, keep_blank_values=True))

    try:
        return json.loads(content)
    except ValueError:
        if response.status_code == 500:
            raise ProtocolError(
                "An OAuth server error was encountered that did not contain a JSON body"
            )
        return content


class TokenRequestExecutor:
    """Executes token requests against one provider."""

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        transport: Transport,
        validator: Optional[ResponseValidator] = None,
    ):
        self.descriptor = descriptor
        self.transport = transport
        self.validator = validator or ResponseValidator(descriptor.error_rule)

    def build_request_parameters(
        self,
        grant: Grant,
        options: Mapping[str, Any],
        identity: ClientIdentity,
    ) -> Dict[str, Any]:
        """Resolve client identity and let the grant shape the body.

        Raises:
            ConfigurationError: If client_id is missing or the grant lacks a required field
        """
        identity = identity.with_overrides(options)
        if not identity.client_id:
            raise ConfigurationError("client_id is required to request an access token")

        defaults = {
            key: value
            for key, value in (
                ("client_id", identity.client_id),
                ("client_secret", identity.client_secret),
                ("redirect_uri", identity.redirect_uri),
            )
            if key in grant.identity_parameters
        }
        extra = {key: value for key, value in options.items() if key not in IDENTITY_KEYS}
        return grant.prepare_request_parameters(defaults, extra)

    def serialize(self, value: Any) -> Any:
        """Join list values with the provider's scope separator"""
        if isinstance(value, (list, tuple)):
            return self.descriptor.scope_separator.join(str(item) for item in value)
        return value

    def build_request(self, params: Mapping[str, Any]) -> Tuple[str, Dict[str, str], str]:
        """Return (url, headers, body) for the token request"""
        params = {key: self.serialize(value) for key, value in params.items()}
        headers = {"Accept": "application/json"}

        if self.descriptor.token_auth_method == "client_secret_basic":
            client_id = params.pop("client_id", "")
            client_secret = params.pop("client_secret", "") or ""
            credentials = f"{quote(client_id, safe='')}:{quote(client_secret, safe='')}"
            encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
            headers["Authorization"] = f"Basic {encoded}"

        if self.descriptor.token_request_format == "json":
            headers["Content-Type"] = "application/json"
            body = json.dumps(params)
        else:
            headers["Content-Type"] = "application/x-www-form-urlencoded"
            body = urlencode(params)

        return self.descriptor.get_token_url(params), headers, body

    async def execute(
        self,
        grant: Union[str, Grant],
        options: Optional[Mapping[str, Any]],
        identity: ClientIdentity,
    ) -> Dict[str, Any]:
        """Exchange a grant for a validated token response.

        Args:
            grant: Grant name or instance
            options: Per-call values (code, code_verifier, client_id, ...)
            identity: Configured client identity used as fallback

        Returns:
            Parsed token response, with client_id echoed when it was passed explicitly

        Raises:
            ConfigurationError: Missing client_id or grant parameters
            TransportError: Network failure (from the transport)
            IdentityProviderError: Provider reported an error
            ProtocolError: Response body is not a JSON object
        """
        grant = resolve_grant(grant)
        options = dict(options or {})

        params = self.build_request_parameters(grant, options, identity)
        url, headers, body = self.build_request(params)

        logger.info(f"Requesting access token from {self.descriptor.name} ({grant.name} grant)")
        response = await self.transport.send("POST", url, headers=headers, body=body)

        data = parse_response(response)
        self.validator.check(response, data)

        if not isinstance(data, dict):
            logger.error(
                f"Token endpoint of {self.descriptor.name} returned a non-JSON body "
                f"(HTTP {response.status_code})"
            )
            raise ProtocolError(
                "Invalid response received from Authorization Server. Expected JSON."
            )

        if options.get("client_id"):
            data["client_id"] = options["client_id"]

        return data
