"""OpenAI chat completion request payload."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel

from .content import ContentPart


class Message(BaseModel):
    """Chat message model."""

    role: Literal["system", "user", "assistant"]
    content: Union[str, List[ContentPart]]


class StreamOptions(BaseModel):
    """Stream options for chat completion."""

    include_usage: bool = False


class ChatCompletionRequest(BaseModel):
    """Body of ``POST /chat/completions``."""

    model: str
    messages: List[Message]
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    logit_bias: Optional[Dict[str, float]] = None
    prediction: Optional[Dict[str, Any]] = None
    reasoning_effort: Optional[Literal["low", "medium", "high"]] = None
    web_search_options: Optional[Dict[str, Any]] = None
    stream: Optional[bool] = None
    stream_options: Optional[StreamOptions] = None

    def to_payload(self) -> dict:
        """Keyword arguments for ``client.chat.completions.create``."""
        return self.model_dump(exclude_none=True)


class EmbeddingRequest(BaseModel):
    """Body of ``POST /embeddings``."""

    model: str
    input: str
    encoding_format: Literal["float"] = "float"

    def to_payload(self) -> dict:
        return self.model_dump()
