"""Provider registry for routing calls to the correct adapter."""

import logging
from typing import Any, Dict, Iterable, List, Type

from ..adapters.anthropic_adapter import AnthropicProvider
from ..adapters.base import BaseLLMProvider
from ..adapters.openai_adapter import OpenAIProvider
from ..exceptions import InvalidProviderConfigError, ProviderNotFoundError
from ..models.provider import LLMProvider, ProviderType

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: Dict[ProviderType, Type[BaseLLMProvider]] = {
    ProviderType.ANTHROPIC: AnthropicProvider,
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.OPENAI_COMPATIBLE: OpenAIProvider,
}


def create_provider(provider: LLMProvider, **kwargs: Any) -> BaseLLMProvider:
    """Build the adapter for a provider record, selected by its type tag."""
    adapter_cls = PROVIDER_CLASSES.get(provider.type)
    if adapter_cls is None:
        raise InvalidProviderConfigError(f"Unsupported provider type: {provider.type}")
    return adapter_cls(provider, **kwargs)


class ProviderRegistry:
    """Maps provider ids to adapter instances.

    Usage:
        registry = ProviderRegistry()
        registry.register(AnthropicProvider(provider_record))
        adapter = registry.get("anthropic")
    """

    def __init__(self):
        self._providers: Dict[str, BaseLLMProvider] = {}

    @classmethod
    def from_providers(cls, providers: Iterable[LLMProvider], **kwargs: Any) -> "ProviderRegistry":
        registry = cls()
        for provider in providers:
            registry.register(create_provider(provider, **kwargs))
        return registry

    def register(self, adapter: BaseLLMProvider) -> None:
        """Register an adapter under its provider id."""
        if adapter.provider_id in self._providers:
            logger.warning(f"Replacing adapter for provider {adapter.provider_id}")
        self._providers[adapter.provider_id] = adapter

    def get(self, provider_id: str) -> BaseLLMProvider:
        """Get the adapter for a provider id.

        Raises:
            ProviderNotFoundError: If no adapter is registered for the id.
        """
        adapter = self._providers.get(provider_id)
        if adapter is None:
            available = ", ".join(sorted(self._providers.keys())) or "(none)"
            raise ProviderNotFoundError(
                f"No provider registered with id '{provider_id}'. "
                f"Available providers: {available}"
            )
        return adapter

    def ids(self) -> List[str]:
        return sorted(self._providers.keys())

    def __contains__(self, provider_id: str) -> bool:
        return provider_id in self._providers
