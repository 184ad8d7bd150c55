"""OAuth client factory.

Builds the process-wide client from settings. The client is stateless per
call, so one cached instance is shared by every request.
"""

import logging
from typing import Optional

from oauth_client.config.settings import get_settings
from oauth_client.core.client import OAuth2Client
from oauth_client.infrastructure.http.transport import HttpxTransport
from oauth_client.providers.ozwillo import build_ozwillo_descriptor
from oauth_client.providers.registry import get_provider_descriptor

logger = logging.getLogger(__name__)

# Global client instance (initialized on first call)
_client_instance: Optional[OAuth2Client] = None


def get_oauth_client() -> OAuth2Client:
    """Get the configured OAuth client instance.

    Provider is selected via OAUTH_PROVIDER; client credentials come from
    OAUTH_CLIENT_ID, OAUTH_CLIENT_SECRET and OAUTH_REDIRECT_URI.

    Returns:
        Configured OAuth2Client

    Raises:
        ConfigurationError: If the provider is unknown
    """
    global _client_instance

    if _client_instance is not None:
        return _client_instance

    settings = get_settings()
    provider = settings.oauth_provider.lower()
    logger.info(f"Initializing OAuth client for provider: {provider}")

    if provider == "ozwillo":
        descriptor = build_ozwillo_descriptor(settings.ozwillo_base_url)
    else:
        descriptor = get_provider_descriptor(provider)

    if not settings.oauth_client_id:
        logger.warning("OAUTH_CLIENT_ID is not set; requests must pass client_id explicitly")

    _client_instance = OAuth2Client(
        descriptor,
        HttpxTransport(
            timeout=settings.http_timeout_seconds,
            verify=settings.http_verify_tls,
        ),
        client_id=settings.oauth_client_id,
        client_secret=settings.oauth_client_secret,
        redirect_uri=settings.oauth_redirect_uri,
        scopes=settings.oauth_scopes,
    )

    logger.info(f"OAuth client initialized: {descriptor.name} ({descriptor.token_endpoint})")
    return _client_instance


def reset_client() -> None:
    """Reset the global client instance (for testing)."""
    global _client_instance
    _client_instance = None
