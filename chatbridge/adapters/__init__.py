"""Provider adapters: canonical requests in, vendor wire formats out, and back."""

from .anthropic_adapter import AnthropicProvider, fold_anthropic_event
from .base import BaseLLMProvider, is_message_empty, normalize_base_url
from .image import ImageData, parse_image_data_url, resolve_image_reference
from .openai_adapter import OpenAIProvider, fold_openai_chunk
from .streaming import StreamState, drive_stream, terminal_chunk

__all__ = [
    "AnthropicProvider",
    "BaseLLMProvider",
    "ImageData",
    "OpenAIProvider",
    "StreamState",
    "drive_stream",
    "fold_anthropic_event",
    "fold_openai_chunk",
    "is_message_empty",
    "normalize_base_url",
    "parse_image_data_url",
    "resolve_image_reference",
    "terminal_chunk",
]
