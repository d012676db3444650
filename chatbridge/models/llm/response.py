"""Canonical response models for one-shot and streamed generation."""

from typing import List, Literal, Optional

from pydantic import BaseModel


class ResponseUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


# =============================================================================
# Non-streaming
# =============================================================================


class ResponseMessage(BaseModel):
    """Generated message."""

    role: str = "assistant"
    content: Optional[str] = None
    reasoning: Optional[str] = None


class Choice(BaseModel):
    """Non-streaming response choice."""

    finish_reason: Optional[str] = None
    message: ResponseMessage


class LLMResponseNonStreaming(BaseModel):
    """Complete response to a non-streaming request."""

    id: str
    object: Literal["chat.completion"] = "chat.completion"
    model: str
    choices: List[Choice]
    usage: Optional[ResponseUsage] = None


# =============================================================================
# Streaming
# =============================================================================


class ResponseDelta(BaseModel):
    """Incremental content carried by one chunk."""

    content: Optional[str] = None
    reasoning: Optional[str] = None


class StreamChoice(BaseModel):
    """Streaming response choice."""

    finish_reason: Optional[str] = None
    delta: ResponseDelta


class LLMResponseStreaming(BaseModel):
    """One chunk of a streamed response.

    Only the terminal chunk carries ``usage``; it has an empty ``choices`` list.
    """

    id: str
    object: Literal["chat.completion.chunk"] = "chat.completion.chunk"
    model: str
    choices: List[StreamChoice]
    usage: Optional[ResponseUsage] = None

    @property
    def is_terminal(self) -> bool:
        return self.usage is not None and not self.choices
