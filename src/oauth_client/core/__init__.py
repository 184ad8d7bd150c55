"""OAuth2/OIDC authorization-code engine.

Components:
- parameters: authorization request parameters (state, nonce, PKCE, scopes)
- url: authorization URL composition
- executor: token requests
- validator: provider error detection
- token_factory: AccessToken construction
- client: OAuth2Client tying them together for one provider
"""
