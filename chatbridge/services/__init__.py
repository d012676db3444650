"""Services for chatbridge."""

from .llm_manager import LLMManager
from .registry import ProviderRegistry, create_provider

__all__ = ["LLMManager", "ProviderRegistry", "create_provider"]
