"""Ozwillo identity provider.

Ozwillo is a standard OpenID Connect provider with a few particulars:
- "openid" must come first, followed by the full profile scope set
- authorization responses are requested in query mode
- errors may come back nested: {"error": {"code": ..., "message": ...}}
- pending application instances can be dismissed with a DELETE call
  when provisioning fails (https://doc.ozwillo.com/#s3-3bis-provider-dismiss)
"""

from typing import Any, Dict, Optional

from oauth_client.domain.models import ResourceOwner
from oauth_client.providers.descriptor import ProviderDescriptor

OZWILLO_PREPROD_URL = "https://accounts.ozwillo-preprod.eu"
OZWILLO_PROD_URL = "https://accounts.ozwillo.com"

OZWILLO_DEFAULT_SCOPES = (
    "openid",
    "email",
    "profile",
    "address",
    "phone",
    "offline_access",
)


class OzwilloUser(ResourceOwner):
    """Ozwillo user, as returned by the userinfo endpoint.

    Attributes follow the OpenID Connect standard claims; anything else
    Ozwillo sends is kept as an extra field.
    """
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    nickname: Optional[str] = None
    email_verified: Optional[bool] = None
    gender: Optional[str] = None
    birthdate: Optional[str] = None
    locale: Optional[str] = None
    zoneinfo: Optional[str] = None
    phone_number: Optional[str] = None
    phone_number_verified: Optional[bool] = None
    address: Optional[Dict[str, Any]] = None
    updated_at: Optional[int] = None

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        full_name = " ".join(part for part in (self.given_name, self.family_name) if part)
        return full_name or self.nickname or self.email or self.sub or ""


def build_ozwillo_descriptor(base_url: str = OZWILLO_PREPROD_URL) -> ProviderDescriptor:
    """Ozwillo descriptor for a given accounts host (preprod or prod)."""
    base_url = base_url.rstrip("/")
    return ProviderDescriptor(
        name="ozwillo",
        authorization_endpoint=f"{base_url}/a/auth",
        token_endpoint=f"{base_url}/a/token",
        resource_owner_endpoint=f"{base_url}/a/userinfo",
        deprovision_endpoint=f"{base_url}/apps/pending-instance/{{instance_id}}",
        default_scopes=OZWILLO_DEFAULT_SCOPES,
        scope_separator=" ",
        authorization_defaults={"response_mode": "query"},
        pkce_method="S256",
        openid_connect=True,
        resource_owner_factory=OzwilloUser.from_response,
    )


OZWILLO = build_ozwillo_descriptor()
