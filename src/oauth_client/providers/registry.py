from typing import Dict, List

from oauth_client.exceptions import ConfigurationError
from oauth_client.providers.descriptor import ProviderDescriptor
from oauth_client.providers.ozwillo import OZWILLO


_PROVIDER_REGISTRY: Dict[str, ProviderDescriptor] = {
    OZWILLO.name: OZWILLO,
}


def get_provider_descriptor(provider_key: str) -> ProviderDescriptor:
    key = (provider_key or "").strip().lower()
    if key not in _PROVIDER_REGISTRY:
        raise ConfigurationError(f"Unsupported OAuth provider: {provider_key}")
    return _PROVIDER_REGISTRY[key]


def register_provider(descriptor: ProviderDescriptor) -> None:
    """Register a provider at startup; replaces any descriptor with the same name"""
    _PROVIDER_REGISTRY[descriptor.name.strip().lower()] = descriptor


def list_provider_keys() -> List[str]:
    return sorted(_PROVIDER_REGISTRY.keys())
