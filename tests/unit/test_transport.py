"""Unit tests for HttpxTransport (httpx.MockTransport, no network)"""

import httpx
import pytest

from oauth_client.exceptions import TransportError, TransportTimeoutError
from oauth_client.infrastructure.http import HttpResponse, HttpxTransport

pytestmark = pytest.mark.unit


def transport_for(handler) -> HttpxTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxTransport(timeout=5, client=client)


class TestSend:

    @pytest.mark.asyncio
    async def test_post_returns_response(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = request.content.decode()
            seen["accept"] = request.headers["accept"]
            return httpx.Response(200, json={"access_token": "abc"})

        transport = transport_for(handler)

        response = await transport.send(
            "post",
            "https://idp.example.org/token",
            headers={"Accept": "application/json"},
            body="grant_type=client_credentials",
        )

        assert seen == {
            "method": "POST",
            "body": "grant_type=client_credentials",
            "accept": "application/json",
        }
        assert isinstance(response, HttpResponse)
        assert response.status_code == 200
        assert response.content_type == "application/json"
        assert '"access_token"' in response.body

    @pytest.mark.asyncio
    async def test_error_status_is_not_raised(self):
        transport = transport_for(lambda request: httpx.Response(400, text="bad"))

        response = await transport.send("GET", "https://idp.example.org/me")

        assert response.status_code == 400
        assert response.body == "bad"

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(TransportTimeoutError) as exc_info:
            await transport_for(handler).send("POST", "https://idp.example.org/token")

        assert exc_info.value.url == "https://idp.example.org/token"

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            await transport_for(handler).send("DELETE", "https://idp.example.org/x")

        assert not isinstance(exc_info.value, TransportTimeoutError)

    @pytest.mark.asyncio
    async def test_unsupported_method(self):
        transport = transport_for(lambda request: httpx.Response(200))

        with pytest.raises(ValueError):
            await transport.send("PATCH", "https://idp.example.org/x")


class TestHttpResponse:

    def test_header_lookup_case_insensitive(self):
        response = HttpResponse(status_code=200, headers={"content-type": "Text/Plain"})

        assert response.header("Content-Type") == "Text/Plain"
        assert response.content_type == "text/plain"
        assert response.header("X-Missing") is None
