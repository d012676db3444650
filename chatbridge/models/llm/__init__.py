"""Canonical (vendor-neutral) request and response models."""

from .content import ContentPart, ImageUrl, ImageUrlContent, TextContent
from .request import (
    LLMOptions,
    LLMRequest,
    LLMRequestNonStreaming,
    LLMRequestStreaming,
    RequestMessage,
)
from .response import (
    Choice,
    LLMResponseNonStreaming,
    LLMResponseStreaming,
    ResponseDelta,
    ResponseMessage,
    ResponseUsage,
    StreamChoice,
)

__all__ = [
    # Content
    "ContentPart",
    "ImageUrl",
    "ImageUrlContent",
    "TextContent",
    # Request
    "LLMOptions",
    "LLMRequest",
    "LLMRequestNonStreaming",
    "LLMRequestStreaming",
    "RequestMessage",
    # Response
    "Choice",
    "LLMResponseNonStreaming",
    "LLMResponseStreaming",
    "ResponseDelta",
    "ResponseMessage",
    "ResponseUsage",
    "StreamChoice",
]
