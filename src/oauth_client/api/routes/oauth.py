"""OAuth Routes

Thin HTTP layer over OAuth2Client:

1. POST /login/initiate - build the provider authorization URL
2. POST /token          - exchange an authorization code
3. POST /refresh        - refresh an access token
4. GET  /userinfo       - resource owner for a Bearer token

Nothing is stored server-side: the caller keeps state, nonce and
code_verifier from /login/initiate and hands them back as needed.
"""

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, Field

from oauth_client.core.client import OAuth2Client
from oauth_client.core.factory import get_oauth_client
from oauth_client.domain.models import AccessToken
from oauth_client.exceptions import (
    ConfigurationError,
    IdentityProviderError,
    MalformedResponseError,
    OAuthClientError,
    ProtocolError,
    TransportError,
    TransportTimeoutError,
)
from oauth_client.providers.registry import list_provider_keys

router = APIRouter(prefix="/api/v1/oauth", tags=["oauth"])
logger = logging.getLogger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================

class ProvidersResponse(BaseModel):
    """Registered providers and the one this service is configured for."""
    active: str
    providers: List[str]


class AuthorizationInitiateResponse(BaseModel):
    """Authorization request details the caller must keep until the callback."""
    authorization_url: str
    state: str
    nonce: Optional[str] = None
    code_verifier: Optional[str] = None


class TokenRequest(BaseModel):
    """Authorization code exchange request."""
    code: str = Field(..., min_length=1)
    redirect_uri: Optional[str] = None
    code_verifier: Optional[str] = None


class RefreshRequest(BaseModel):
    """Token refresh request."""
    refresh_token: str = Field(..., min_length=1)


# ============================================================================
# Helper Functions
# ============================================================================

async def extract_bearer_token(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> Optional[str]:
    """Extract Bearer token from Authorization header."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[7:].strip()


def to_http_exception(error: OAuthClientError) -> HTTPException:
    """Map engine errors to HTTP responses."""
    if isinstance(error, IdentityProviderError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": error.message, "code": error.code},
        )
    if isinstance(error, (ProtocolError, MalformedResponseError)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    if isinstance(error, TransportTimeoutError):
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(error))
    if isinstance(error, TransportError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


# ============================================================================
# Endpoints
# ============================================================================

@router.get("/providers", response_model=ProvidersResponse)
async def get_providers(client: OAuth2Client = Depends(get_oauth_client)):
    """List registered providers."""
    return ProvidersResponse(active=client.descriptor.name, providers=list_provider_keys())


@router.post("/login/initiate", response_model=AuthorizationInitiateResponse)
async def initiate_login(
    redirect_uri: Optional[str] = Query(None, description="Callback URL (defaults to configured one)"),
    scope: Optional[List[str]] = Query(None, description="Extra scopes to request"),
    prompt: Optional[str] = Query(None, description="OIDC prompt (none, login, consent)"),
    ui_locales: Optional[str] = Query(None, description="Preferred UI languages"),
    pkce: bool = Query(True, description="Generate a PKCE verifier/challenge pair"),
    client: OAuth2Client = Depends(get_oauth_client),
):
    """Build the provider authorization URL.

    Returns:
        Authorization URL plus state, nonce and code_verifier to keep for /token
    """
    options = {
        "redirect_uri": redirect_uri,
        "scope": scope,
        "prompt": prompt,
        "ui_locales": ui_locales,
    }
    try:
        request = client.create_authorization_request(options, pkce=pkce)
    except OAuthClientError as e:
        logger.error(f"Failed to build authorization request: {e}")
        raise to_http_exception(e)

    logger.info(f"Authorization request initiated for {client.descriptor.name}")
    return AuthorizationInitiateResponse(
        authorization_url=request.url,
        state=request.state,
        nonce=request.nonce,
        code_verifier=request.code_verifier,
    )


@router.post("/token")
async def exchange_code(
    body: TokenRequest,
    client: OAuth2Client = Depends(get_oauth_client),
) -> dict[str, Any]:
    """Exchange an authorization code for tokens."""
    options = {
        "code": body.code,
        "redirect_uri": body.redirect_uri,
        "code_verifier": body.code_verifier,
    }
    try:
        token = await client.get_access_token("authorization_code", options)
    except OAuthClientError as e:
        logger.error(f"Authorization code exchange failed: {e}")
        raise to_http_exception(e)

    return token.to_dict()


@router.post("/refresh")
async def refresh_tokens(
    body: RefreshRequest,
    client: OAuth2Client = Depends(get_oauth_client),
) -> dict[str, Any]:
    """Refresh an access token."""
    try:
        token = await client.refresh_access_token(body.refresh_token)
    except OAuthClientError as e:
        logger.error(f"Token refresh failed: {e}")
        raise to_http_exception(e)

    return token.to_dict()


@router.get("/userinfo")
async def get_userinfo(
    token: Optional[str] = Depends(extract_bearer_token),
    client: OAuth2Client = Depends(get_oauth_client),
) -> dict[str, Any]:
    """Fetch the resource owner for a Bearer access token."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication token",
        )

    try:
        owner = await client.get_resource_owner(AccessToken(token=token))
    except OAuthClientError as e:
        logger.error(f"Resource owner lookup failed: {e}")
        raise to_http_exception(e)

    return owner.to_dict()
