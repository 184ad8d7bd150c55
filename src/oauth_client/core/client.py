"""OAuth2/OIDC authorization-code client.

Composes the engine components for one provider:

    ParameterBuilder + AuthorizationUrlComposer  -> authorization URL
    TokenRequestExecutor + ResponseValidator     -> validated token response
    TokenFactory                                 -> AccessToken

The client keeps no per-flow state. The configured ClientIdentity is
immutable and per-call options only affect that call, so a single instance
can be shared between concurrent requests. The caller keeps the state,
nonce and code_verifier returned with the AuthorizationRequest.
"""

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from oauth_client.core.executor import TokenRequestExecutor, parse_response
from oauth_client.core.grants import REFRESH_TOKEN, Grant, resolve_grant
from oauth_client.core.parameters import ParameterBuilder
from oauth_client.core.pkce import generate_pkce_pair
from oauth_client.core.token_factory import TokenFactory
from oauth_client.core.url import AuthorizationUrlComposer
from oauth_client.core.validator import ResponseValidator
from oauth_client.domain.models import (
    AccessToken,
    AuthorizationRequest,
    AuthorizationRequestParameters,
    ClientIdentity,
)
from oauth_client.exceptions import (
    ConfigurationError,
    IdentityProviderError,
    MalformedResponseError,
    NonceMismatchError,
    ProtocolError,
)
from oauth_client.infrastructure.http.transport import Transport
from oauth_client.providers.descriptor import ProviderDescriptor

logger = logging.getLogger(__name__)


class OAuth2Client:
    """Authorization-code client bound to one provider descriptor.

    Example:
        client = OAuth2Client(
            OZWILLO,
            HttpxTransport(timeout=10),
            client_id="my-app",
            client_secret="...",
            redirect_uri="https://app.example.org/callback",
        )
        request = client.create_authorization_request(pkce=True)
        # redirect to request.url, keep request.state / nonce / code_verifier
        token = await client.get_access_token(
            "authorization_code",
            {"code": code, "code_verifier": request.code_verifier},
        )
    """

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        transport: Transport,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        scopes: Optional[Sequence[str]] = None,
    ):
        self.descriptor = descriptor
        self.transport = transport
        self.identity = ClientIdentity(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
        )

        self.validator = ResponseValidator(descriptor.error_rule)
        self.parameter_builder = ParameterBuilder(descriptor, scopes)
        self.url_composer = AuthorizationUrlComposer(descriptor.scope_separator)
        self.executor = TokenRequestExecutor(descriptor, transport, self.validator)
        self.token_factory = TokenFactory(descriptor.resource_owner_id_key)

    # ------------------------------------------------------------------
    # Authorization leg
    # ------------------------------------------------------------------

    def get_authorization_parameters(
        self, options: Optional[Mapping[str, Any]] = None
    ) -> AuthorizationRequestParameters:
        return self.parameter_builder.build(options, self.identity)

    def get_authorization_url(self, options: Optional[Mapping[str, Any]] = None) -> str:
        """Build the authorization URL.

        Use create_authorization_request when the generated state/nonce are
        needed afterwards.
        """
        return self.create_authorization_request(options).url

    def create_authorization_request(
        self,
        options: Optional[Mapping[str, Any]] = None,
        pkce: bool = False,
    ) -> AuthorizationRequest:
        """Build an authorization request.

        Args:
            options: Caller options (scope, state, prompt, ui_locales, ...)
            pkce: Generate a code_verifier/code_challenge pair

        Returns:
            AuthorizationRequest with the URL and the values to keep for the callback

        Raises:
            ConfigurationError: If no client_id is available
        """
        options = dict(options or {})
        code_verifier = None
        if pkce and not options.get("code_challenge"):
            method = options.get("code_challenge_method") or self.descriptor.pkce_method
            code_verifier, options["code_challenge"] = generate_pkce_pair(method)
            options["code_challenge_method"] = method

        params = self.get_authorization_parameters(options)
        url = self.url_composer.compose(self.descriptor.get_authorization_url(), params)

        return AuthorizationRequest(
            url=url,
            state=params["state"],
            nonce=params.get("nonce"),
            code_verifier=code_verifier,
            parameters=params,
        )

    # ------------------------------------------------------------------
    # Token leg
    # ------------------------------------------------------------------

    async def get_access_token(
        self,
        grant: Union[str, Grant],
        options: Optional[Mapping[str, Any]] = None,
    ) -> AccessToken:
        """Request an access token using a grant and option set.

        Example:
            await client.get_access_token("authorization_code", {
                "code": request.query_params["code"],
                "client_id": tenant.client_id,
                "client_secret": tenant.client_secret,
                "redirect_uri": tenant.redirect_uri,
            })

        Raises:
            ConfigurationError, TransportError, IdentityProviderError,
            ProtocolError, MalformedResponseError
        """
        grant = resolve_grant(grant)
        options = dict(options or {})

        response = await self.executor.execute(grant, options, self.identity)

        # Some providers don't rotate refresh tokens
        if grant.name == REFRESH_TOKEN.name and not response.get("refresh_token"):
            response["refresh_token"] = options.get("refresh_token")

        return self.token_factory.create(response, grant)

    async def refresh_access_token(
        self,
        refresh_token: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> AccessToken:
        options = dict(options or {})
        options["refresh_token"] = refresh_token
        return await self.get_access_token(REFRESH_TOKEN, options)

    def verify_nonce(self, token: AccessToken, expected_nonce: str) -> None:
        """Check the id_token nonce claim against the nonce that was sent.

        The id_token signature is not verified here.

        Raises:
            NonceMismatchError: If the token has no id_token or the nonce differs
        """
        try:
            claims = token.id_token_claims()
        except MalformedResponseError as e:
            raise NonceMismatchError(f"Cannot read id_token nonce: {e}") from e

        if claims.get("nonce") != expected_nonce:
            logger.warning(f"id_token nonce mismatch for {self.descriptor.name}")
            raise NonceMismatchError("id_token nonce does not match the authorization request")

    # ------------------------------------------------------------------
    # Resource owner
    # ------------------------------------------------------------------

    def get_authorization_headers(self, token: Union[AccessToken, str]) -> dict:
        return {"Authorization": f"Bearer {token}"}

    async def get_resource_owner(self, token: AccessToken) -> Any:
        """Fetch the resource owner (userinfo) for a token.

        Returns:
            Object built by the descriptor's resource_owner_factory

        Raises:
            TransportError, IdentityProviderError, ProtocolError
            MalformedResponseError: userinfo does not match the resource owner model
        """
        url = self.descriptor.get_resource_owner_url(token)
        headers = {"Accept": "application/json", **self.get_authorization_headers(token)}

        response = await self.transport.send("GET", url, headers=headers)
        data = parse_response(response)
        self.validator.check(response, data)

        if not isinstance(data, dict):
            logger.error(
                f"Resource owner endpoint of {self.descriptor.name} returned a non-JSON body "
                f"(HTTP {response.status_code})"
            )
            raise ProtocolError(
                "Invalid response received from Authorization Server. Expected JSON."
            )

        try:
            return self.descriptor.resource_owner_factory(data)
        except ValidationError as e:
            logger.error(f"Invalid resource owner data from {self.descriptor.name}: {e}")
            raise MalformedResponseError(
                f"Resource owner response does not match the expected schema: "
                f"{e.error_count()} invalid field(s)"
            ) from e

    # ------------------------------------------------------------------
    # Provider housekeeping
    # ------------------------------------------------------------------

    async def dismiss_instance_on_error(self, instance_id: Optional[str]) -> bool:
        """Delete a pending provider instance after a failed provisioning.

        Returns:
            False when no instance id is given (nothing sent), True once deleted

        Raises:
            ConfigurationError: Provider has no deprovisioning endpoint
            TransportError: Network failure
            IdentityProviderError: Provider rejected the deletion
        """
        if not instance_id:
            return False

        url = self.descriptor.get_deprovision_url(instance_id)
        if not url:
            raise ConfigurationError(
                f"Provider {self.descriptor.name} has no deprovisioning endpoint"
            )

        response = await self.transport.send("DELETE", url)
        if response.status_code >= 400:
            logger.error(
                f"Failed to dismiss instance {instance_id} on {self.descriptor.name}: "
                f"HTTP {response.status_code}"
            )
            raise IdentityProviderError(
                f"Instance dismissal failed with HTTP {response.status_code}",
                response.status_code,
                response.body,
            )

        logger.info(f"Dismissed pending instance {instance_id} on {self.descriptor.name}")
        return True
