"""chatbridge: one chat-completion contract over several LLM vendor APIs."""

from .adapters import AnthropicProvider, BaseLLMProvider, OpenAIProvider
from .cancellation import CancellationToken
from .exceptions import LLMError
from .models.llm import (
    LLMOptions,
    LLMRequest,
    LLMRequestNonStreaming,
    LLMRequestStreaming,
    LLMResponseNonStreaming,
    LLMResponseStreaming,
)
from .services import LLMManager, ProviderRegistry

__version__ = "1.0.0"

__all__ = [
    "AnthropicProvider",
    "BaseLLMProvider",
    "CancellationToken",
    "LLMError",
    "LLMManager",
    "LLMOptions",
    "LLMRequest",
    "LLMRequestNonStreaming",
    "LLMRequestStreaming",
    "LLMResponseNonStreaming",
    "LLMResponseStreaming",
    "OpenAIProvider",
    "ProviderRegistry",
]
