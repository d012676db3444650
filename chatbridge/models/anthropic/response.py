"""Anthropic Messages API response and streaming event models.

Vendor objects are normalized to dicts and validated into these models so the
translation code never depends on SDK classes.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


class Usage(BaseModel):
    """Anthropic token usage."""

    input_tokens: int = 0
    output_tokens: int = 0


class ResponseBlock(BaseModel):
    """Any content block of an assistant reply (text, thinking, tool_use, ...)."""

    model_config = ConfigDict(extra="allow")

    type: str
    text: Optional[str] = None
    thinking: Optional[str] = None


class MessagesResponse(BaseModel):
    """Anthropic Messages API response."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: Literal["message"] = "message"
    role: str = "assistant"
    content: List[ResponseBlock]
    model: str
    stop_reason: Optional[str] = None
    usage: Usage


# =============================================================================
# Streaming Events
# =============================================================================


class StartedMessage(BaseModel):
    """Message skeleton carried by message_start."""

    model_config = ConfigDict(extra="allow")

    id: str
    model: str
    usage: Usage


class MessageStart(BaseModel):
    """message_start event data."""

    type: Literal["message_start"] = "message_start"
    message: StartedMessage


class BlockDelta(BaseModel):
    """Delta payload: text_delta, thinking_delta, input_json_delta, signature_delta."""

    model_config = ConfigDict(extra="allow")

    type: str
    text: Optional[str] = None
    thinking: Optional[str] = None
    partial_json: Optional[str] = None


class ContentBlockDelta(BaseModel):
    """content_block_delta event data."""

    type: Literal["content_block_delta"] = "content_block_delta"
    index: int = 0
    delta: BlockDelta


class DeltaUsage(BaseModel):
    """Usage reported by message_delta."""

    output_tokens: int = 0


class MessageDelta(BaseModel):
    """message_delta event data."""

    type: Literal["message_delta"] = "message_delta"
    delta: Dict[str, Any] = {}
    usage: DeltaUsage


class OtherEvent(BaseModel):
    """Events the translation ignores (ping, content_block_start/stop, message_stop)."""

    model_config = ConfigDict(extra="allow")

    type: str


StreamEvent = Union[MessageStart, ContentBlockDelta, MessageDelta, OtherEvent]

_EVENT_MODELS = {
    "message_start": MessageStart,
    "content_block_delta": ContentBlockDelta,
    "message_delta": MessageDelta,
}


def parse_stream_event(data: Dict[str, Any]) -> StreamEvent:
    """Validate a raw event dict into its event model."""
    model = _EVENT_MODELS.get(data.get("type", ""), OtherEvent)
    return model.model_validate(data)
