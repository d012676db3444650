"""Anthropic Messages API wire models."""

from .content import Base64ImageSource, ContentBlock, ImageBlock, TextBlock
from .request import Message, MessagesRequest, ThinkingConfig
from .response import (
    BlockDelta,
    ContentBlockDelta,
    DeltaUsage,
    MessageDelta,
    MessageStart,
    MessagesResponse,
    OtherEvent,
    ResponseBlock,
    StartedMessage,
    StreamEvent,
    Usage,
    parse_stream_event,
)

__all__ = [
    # Content
    "Base64ImageSource",
    "ContentBlock",
    "ImageBlock",
    "TextBlock",
    # Request
    "Message",
    "MessagesRequest",
    "ThinkingConfig",
    # Response
    "BlockDelta",
    "ContentBlockDelta",
    "DeltaUsage",
    "MessageDelta",
    "MessageStart",
    "MessagesResponse",
    "OtherEvent",
    "ResponseBlock",
    "StartedMessage",
    "StreamEvent",
    "Usage",
    "parse_stream_event",
]
