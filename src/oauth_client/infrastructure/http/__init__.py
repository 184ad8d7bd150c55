"""HTTP transport for provider calls"""

from .transport import HttpResponse, HttpxTransport, Transport

__all__ = [
    "HttpResponse",
    "HttpxTransport",
    "Transport",
]
