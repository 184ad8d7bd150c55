"""
Pytest configuration and fixtures for OAuth client tests.

Provides fixtures for:
- Provider descriptor (Ozwillo)
- Mocked transport (no network)
- OAuth2Client wired to the mocked transport
"""

import json
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from oauth_client.core.client import OAuth2Client
from oauth_client.infrastructure.http.transport import HttpResponse
from oauth_client.providers.ozwillo import OZWILLO


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without external dependencies")
    config.addinivalue_line("markers", "integration: tests exercising the HTTP API")


def build_json_response(data: Any, status_code: int = 200, headers: Optional[dict] = None) -> HttpResponse:
    """Build a JSON HttpResponse"""
    return HttpResponse(
        status_code=status_code,
        headers=headers or {"Content-Type": "application/json"},
        body=json.dumps(data),
    )


def build_text_response(body: str, status_code: int = 200, content_type: str = "text/plain") -> HttpResponse:
    """Build a non-JSON HttpResponse"""
    return HttpResponse(status_code=status_code, headers={"Content-Type": content_type}, body=body)


@pytest.fixture
def json_response():
    """Factory for JSON provider responses"""
    return build_json_response


@pytest.fixture
def text_response():
    """Factory for non-JSON provider responses"""
    return build_text_response


@pytest.fixture
def descriptor():
    """Ozwillo provider descriptor"""
    return OZWILLO


@pytest.fixture
def mock_transport():
    """Mock transport returning a valid token response by default"""
    transport = AsyncMock()
    transport.send = AsyncMock(
        return_value=build_json_response(
            {
                "access_token": "at-123",
                "token_type": "Bearer",
                "expires_in": 3600,
                "refresh_token": "rt-456",
            }
        )
    )
    return transport


@pytest.fixture
def oauth_client(descriptor, mock_transport):
    """OAuth client with test credentials and mocked transport"""
    return OAuth2Client(
        descriptor,
        mock_transport,
        client_id="test-client",
        client_secret="test-secret",
        redirect_uri="https://app.example.org/callback",
        scopes=["urn:ozwillo:test"],
    )
