"""Data models: canonical request/response, vendor wire formats, settings records."""

from . import anthropic, llm, openai
from .common import TokenUsage
from .provider import ChatModel, EmbeddingModel, LLMProvider, ProviderType, ThinkingConfig

__all__ = [
    # Submodules
    "anthropic",
    "llm",
    "openai",
    # Common
    "TokenUsage",
    # Settings records
    "ChatModel",
    "EmbeddingModel",
    "LLMProvider",
    "ProviderType",
    "ThinkingConfig",
]
