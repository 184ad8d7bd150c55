"""Unit tests for OAuth2Client

Tests the authorization and token legs end to end with a mocked transport.
"""

import asyncio
from urllib.parse import parse_qs, urlsplit

import pytest
from jose import jwt
from pydantic import ValidationError

from oauth_client.core.client import OAuth2Client
from oauth_client.core.pkce import derive_code_challenge
from oauth_client.domain.models import AccessToken
from oauth_client.exceptions import (
    ConfigurationError,
    IdentityProviderError,
    MalformedResponseError,
    NonceMismatchError,
    ProtocolError,
    TransportError,
)
from oauth_client.providers.descriptor import ProviderDescriptor
from oauth_client.providers.ozwillo import OzwilloUser

pytestmark = pytest.mark.unit


def query_of(url: str) -> dict:
    return {key: values[0] for key, values in parse_qs(urlsplit(url).query).items()}


def form_of(mock_transport) -> dict:
    body = mock_transport.send.call_args.kwargs["body"]
    return {key: values[0] for key, values in parse_qs(body).items()}


class TestAuthorizationRequest:
    """Test the authorization leg"""

    def test_url_and_returned_values(self, oauth_client):
        request = oauth_client.create_authorization_request({"prompt": "login"})
        query = query_of(request.url)

        assert request.url.startswith("https://accounts.ozwillo-preprod.eu/a/auth?")
        assert query["response_type"] == "code"
        assert query["client_id"] == "test-client"
        assert query["redirect_uri"] == "https://app.example.org/callback"
        assert query["state"] == request.state
        assert query["nonce"] == request.nonce
        assert query["prompt"] == "login"
        assert query["response_mode"] == "query"
        assert query["scope"].split(" ")[0] == "openid"
        assert "urn:ozwillo:test" in query["scope"].split(" ")
        assert request.code_verifier is None

    def test_caller_state_kept(self, oauth_client):
        request = oauth_client.create_authorization_request({"state": "my-state"})

        assert request.state == "my-state"

    def test_each_request_gets_fresh_state_and_nonce(self, oauth_client):
        first = oauth_client.create_authorization_request()
        second = oauth_client.create_authorization_request()

        assert first.state != second.state
        assert first.nonce != second.nonce

    def test_pkce_generated(self, oauth_client):
        request = oauth_client.create_authorization_request(pkce=True)
        query = query_of(request.url)

        assert request.code_verifier
        assert query["code_challenge_method"] == "S256"
        assert query["code_challenge"] == derive_code_challenge(request.code_verifier, "S256")

    def test_caller_challenge_not_replaced(self, oauth_client):
        request = oauth_client.create_authorization_request(
            {"code_challenge": "abc", "code_challenge_method": "plain"}, pkce=True
        )
        query = query_of(request.url)

        assert request.code_verifier is None
        assert query["code_challenge"] == "abc"
        assert query["code_challenge_method"] == "plain"

    def test_no_pkce_parameters_by_default(self, oauth_client):
        url = oauth_client.get_authorization_url()

        assert "code_challenge" not in url

    def test_client_id_override_does_not_leak(self, oauth_client):
        request = oauth_client.create_authorization_request({"client_id": "tenant-client"})

        assert query_of(request.url)["client_id"] == "tenant-client"
        assert oauth_client.identity.client_id == "test-client"
        assert query_of(oauth_client.get_authorization_url())["client_id"] == "test-client"

    def test_missing_client_id(self, descriptor, mock_transport):
        client = OAuth2Client(descriptor, mock_transport)

        with pytest.raises(ConfigurationError):
            client.get_authorization_url()


class TestAccessToken:
    """Test the token leg"""

    @pytest.mark.asyncio
    async def test_authorization_code(self, oauth_client, mock_transport):
        token = await oauth_client.get_access_token(
            "authorization_code", {"code": "auth-code", "code_verifier": "verifier"}
        )

        assert isinstance(token, AccessToken)
        assert token.token == "at-123"
        assert token.refresh_token == "rt-456"
        assert token.token_type == "Bearer"
        assert token.expires is not None
        assert form_of(mock_transport)["code_verifier"] == "verifier"

    @pytest.mark.asyncio
    async def test_provider_error(self, oauth_client, mock_transport, json_response):
        mock_transport.send.return_value = json_response(
            {"error": "invalid_grant"}, status_code=400
        )

        with pytest.raises(IdentityProviderError) as exc_info:
            await oauth_client.get_access_token("authorization_code", {"code": "bad"})

        assert exc_info.value.message == "invalid_grant"

    @pytest.mark.asyncio
    async def test_refresh_keeps_previous_refresh_token(
        self, oauth_client, mock_transport, json_response
    ):
        mock_transport.send.return_value = json_response(
            {"access_token": "at-new", "expires_in": 3600}
        )

        token = await oauth_client.refresh_access_token("rt-old")

        assert token.token == "at-new"
        assert token.refresh_token == "rt-old"
        assert form_of(mock_transport)["grant_type"] == "refresh_token"
        assert form_of(mock_transport)["refresh_token"] == "rt-old"

    @pytest.mark.asyncio
    async def test_refresh_uses_rotated_refresh_token(self, oauth_client):
        token = await oauth_client.refresh_access_token("rt-old")

        assert token.refresh_token == "rt-456"

    @pytest.mark.asyncio
    async def test_unknown_grant(self, oauth_client, mock_transport):
        with pytest.raises(ConfigurationError):
            await oauth_client.get_access_token("implicit")

        mock_transport.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_requests_are_isolated(
        self, descriptor, mock_transport, json_response
    ):
        """Per-call client ids must never bleed into other in-flight requests"""

        async def echo_client(method, url, headers=None, body=None):
            client_id = parse_qs(body)["client_id"][0]
            await asyncio.sleep(0)
            return json_response({"access_token": f"at-{client_id}"})

        mock_transport.send.side_effect = echo_client
        client = OAuth2Client(descriptor, mock_transport, client_id="shared")

        tokens = await asyncio.gather(
            *(
                client.get_access_token(
                    "authorization_code", {"code": "c", "client_id": f"tenant-{i}"}
                )
                for i in range(10)
            )
        )

        assert [token.token for token in tokens] == [f"at-tenant-{i}" for i in range(10)]
        assert [token.values["client_id"] for token in tokens] == [
            f"tenant-{i}" for i in range(10)
        ]
        assert client.identity.client_id == "shared"


class TestVerifyNonce:

    @staticmethod
    def token_with_nonce(nonce):
        claims = {"sub": "user-1"}
        if nonce is not None:
            claims["nonce"] = nonce
        id_token = jwt.encode(claims, "test-key", algorithm="HS256")
        return AccessToken(token="at", values={"id_token": id_token})

    def test_matching_nonce(self, oauth_client):
        oauth_client.verify_nonce(self.token_with_nonce("n-1"), "n-1")

    def test_different_nonce(self, oauth_client):
        with pytest.raises(NonceMismatchError):
            oauth_client.verify_nonce(self.token_with_nonce("n-2"), "n-1")

    def test_missing_nonce_claim(self, oauth_client):
        with pytest.raises(NonceMismatchError):
            oauth_client.verify_nonce(self.token_with_nonce(None), "n-1")

    def test_missing_id_token(self, oauth_client):
        with pytest.raises(NonceMismatchError):
            oauth_client.verify_nonce(AccessToken(token="at"), "n-1")


class TestResourceOwner:

    @pytest.mark.asyncio
    async def test_fetches_userinfo(self, oauth_client, mock_transport, json_response):
        mock_transport.send.return_value = json_response(
            {"sub": "user-1", "email": "jane@example.org", "given_name": "Jane", "org": "x"}
        )

        owner = await oauth_client.get_resource_owner(AccessToken(token="at-123"))

        args = mock_transport.send.call_args
        assert args.args == ("GET", "https://accounts.ozwillo-preprod.eu/a/userinfo")
        assert args.kwargs["headers"]["Authorization"] == "Bearer at-123"
        assert isinstance(owner, OzwilloUser)
        assert owner.get_id() == "user-1"
        assert owner.to_dict()["org"] == "x"

    @pytest.mark.asyncio
    async def test_non_json_userinfo(self, oauth_client, mock_transport, text_response):
        mock_transport.send.return_value = text_response("not json")

        with pytest.raises(ProtocolError):
            await oauth_client.get_resource_owner(AccessToken(token="at-123"))

    @pytest.mark.asyncio
    async def test_userinfo_error(self, oauth_client, mock_transport, json_response):
        mock_transport.send.return_value = json_response(
            {"error": {"code": 401, "message": "invalid token"}}, status_code=401
        )

        with pytest.raises(IdentityProviderError) as exc_info:
            await oauth_client.get_resource_owner(AccessToken(token="at-123"))

        assert exc_info.value.code == 401

    @pytest.mark.asyncio
    async def test_userinfo_schema_mismatch(self, oauth_client, mock_transport, json_response):
        mock_transport.send.return_value = json_response({"sub": 12345, "email": ["a", "b"]})

        with pytest.raises(MalformedResponseError, match="expected schema") as exc_info:
            await oauth_client.get_resource_owner(AccessToken(token="at-123"))

        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_authorization_headers(self, oauth_client):
        assert oauth_client.get_authorization_headers(AccessToken(token="abc")) == {
            "Authorization": "Bearer abc"
        }


class TestDismissInstance:

    @pytest.mark.asyncio
    async def test_empty_instance_id(self, oauth_client, mock_transport):
        assert await oauth_client.dismiss_instance_on_error("") is False
        assert await oauth_client.dismiss_instance_on_error(None) is False

        mock_transport.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_deletes_pending_instance(self, oauth_client, mock_transport, text_response):
        mock_transport.send.return_value = text_response("", status_code=204)

        assert await oauth_client.dismiss_instance_on_error("inst-42") is True

        mock_transport.send.assert_called_once_with(
            "DELETE", "https://accounts.ozwillo-preprod.eu/apps/pending-instance/inst-42"
        )

    @pytest.mark.asyncio
    async def test_rejected_by_provider(self, oauth_client, mock_transport, text_response):
        mock_transport.send.return_value = text_response("forbidden", status_code=403)

        with pytest.raises(IdentityProviderError) as exc_info:
            await oauth_client.dismiss_instance_on_error("inst-42")

        assert exc_info.value.code == 403
        assert exc_info.value.response == "forbidden"

    @pytest.mark.asyncio
    async def test_network_failure(self, oauth_client, mock_transport):
        mock_transport.send.side_effect = TransportError("connection refused")

        with pytest.raises(TransportError):
            await oauth_client.dismiss_instance_on_error("inst-42")

    @pytest.mark.asyncio
    async def test_provider_without_endpoint(self, mock_transport):
        descriptor = ProviderDescriptor(
            name="plain",
            authorization_endpoint="https://idp.example.org/auth",
            token_endpoint="https://idp.example.org/token",
            resource_owner_endpoint="https://idp.example.org/me",
        )
        client = OAuth2Client(descriptor, mock_transport, client_id="abc")

        with pytest.raises(ConfigurationError):
            await client.dismiss_instance_on_error("inst-42")
