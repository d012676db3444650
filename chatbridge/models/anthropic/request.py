"""Anthropic Messages API request payload."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .content import ContentBlock


class Message(BaseModel):
    """Anthropic message format. There is no system role on the wire."""

    role: Literal["user", "assistant"]
    content: Union[str, List[ContentBlock]]


class ThinkingConfig(BaseModel):
    """Anthropic extended thinking configuration."""

    type: Literal["enabled"] = "enabled"
    budget_tokens: int = Field(ge=1024)


class MessagesRequest(BaseModel):
    """Body of ``POST /v1/messages``."""

    model: str
    messages: List[Message]
    max_tokens: int
    system: Optional[str] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    thinking: Optional[ThinkingConfig] = None
    stream: Optional[bool] = None

    def to_payload(self) -> dict:
        """Keyword arguments for ``client.messages.create``."""
        return self.model_dump(exclude_none=True)
