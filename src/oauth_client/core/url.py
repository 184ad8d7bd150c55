"""Authorization URL composition."""

import json
from typing import Any, List, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode

from oauth_client.domain.models import AuthorizationRequestParameters


class AuthorizationUrlComposer:
    """Turns a base URL and a parameter mapping into a request URL.

    Scope lists are joined with the provider's separator, mappings (claims)
    are sent as compact JSON, and None/empty values are left out entirely.
    Percent-encoding follows RFC 3986, so spaces become %20.
    """

    def __init__(self, scope_separator: str = " "):
        self.scope_separator = scope_separator

    def serialize(self, key: str, value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, Mapping):
            return json.dumps(value, separators=(",", ":")) if value else None
        if isinstance(value, (list, tuple)):
            separator = self.scope_separator if key == "scope" else " "
            joined = separator.join(str(item) for item in value)
            return joined or None
        text = str(value)
        return text or None

    def query_pairs(self, parameters: AuthorizationRequestParameters) -> List[Tuple[str, str]]:
        pairs = []
        for key, value in parameters.items():
            serialized = self.serialize(key, value)
            if serialized is not None:
                pairs.append((key, serialized))
        return pairs

    def compose(self, base_url: str, parameters: AuthorizationRequestParameters) -> str:
        query = urlencode(self.query_pairs(parameters), quote_via=quote)
        if not query:
            return base_url
        if "?" not in base_url:
            return f"{base_url}?{query}"
        if base_url.endswith(("?", "&")):
            return f"{base_url}{query}"
        return f"{base_url}&{query}"
