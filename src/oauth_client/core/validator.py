"""Provider response validation.

Inspects a parsed response for an ``error`` field and raises
IdentityProviderError. Two shapes are understood:

    {"error": "invalid_grant"}                              -> code 0
    {"error": {"code": 400, "message": "bad request"}}      -> code 400
"""

import logging
from typing import Any, Callable, Mapping, Optional

from oauth_client.exceptions import IdentityProviderError
from oauth_client.infrastructure.http.transport import HttpResponse

logger = logging.getLogger(__name__)

ErrorRule = Callable[[HttpResponse, Mapping[str, Any]], Optional[IdentityProviderError]]


def _error_code(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def extract_provider_error(
    response: HttpResponse, data: Mapping[str, Any]
) -> Optional[IdentityProviderError]:
    """Default error rule: flat string or nested {code, message} object."""
    error = data.get("error")
    if not error:
        return None

    if isinstance(error, Mapping):
        message = error.get("message") or str(dict(error))
        return IdentityProviderError(str(message), _error_code(error.get("code")), dict(data))

    return IdentityProviderError(str(error), 0, dict(data))


class ResponseValidator:
    """Raise on provider error responses, pass everything else through.

    Non-mapping bodies are passed through untouched; deciding that they are
    unusable is the caller's job (see TokenRequestExecutor).
    """

    def __init__(self, rule: Optional[ErrorRule] = None):
        self.rule = rule or extract_provider_error

    def check(self, response: HttpResponse, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        error = self.rule(response, data)
        if error is not None:
            logger.warning(
                f"Provider returned error (HTTP {response.status_code}): "
                f"{error.message} (code={error.code})"
            )
            raise error
        return data
