"""OAuth provider descriptors.

Supported providers:
- ozwillo: Ozwillo accounts (OpenID Connect)
"""

from .descriptor import ProviderDescriptor
from .ozwillo import OZWILLO, OzwilloUser, build_ozwillo_descriptor
from .registry import get_provider_descriptor, list_provider_keys, register_provider

__all__ = [
    "ProviderDescriptor",
    "OZWILLO",
    "OzwilloUser",
    "build_ozwillo_descriptor",
    "get_provider_descriptor",
    "list_provider_keys",
    "register_provider",
]
