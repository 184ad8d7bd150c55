"""Resource owner models.

The userinfo response of an OIDC provider is mapped onto a pydantic model.
Unknown claims are kept so provider-specific fields are not lost.
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict


class ResourceOwner(BaseModel):
    """Generic resource owner built from a userinfo response.

    Attributes:
        sub: Subject identifier (unique user id at the provider)
        email: Email address, if released
        name: Full name, if released
    """
    model_config = ConfigDict(extra="allow")

    sub: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None

    def get_id(self) -> Optional[str]:
        return self.sub

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> 'ResourceOwner':
        return cls.model_validate(dict(response))
