"""OpenAI Chat Completions wire models."""

from .content import ContentPart, ImageUrl, ImageUrlContent, TextContent
from .request import ChatCompletionRequest, EmbeddingRequest, Message, StreamOptions
from .response import (
    ChatCompletionChunk,
    ChatCompletionResponse,
    Choice,
    DeltaContent,
    EmbeddingData,
    EmbeddingResponse,
    ResponseMessage,
    StreamChoice,
    Usage,
)

__all__ = [
    # Content
    "ContentPart",
    "ImageUrl",
    "ImageUrlContent",
    "TextContent",
    # Request
    "ChatCompletionRequest",
    "EmbeddingRequest",
    "Message",
    "StreamOptions",
    # Response
    "ChatCompletionChunk",
    "ChatCompletionResponse",
    "Choice",
    "DeltaContent",
    "EmbeddingData",
    "EmbeddingResponse",
    "ResponseMessage",
    "StreamChoice",
    "Usage",
]
