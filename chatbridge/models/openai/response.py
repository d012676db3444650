"""OpenAI chat completion response models.

Compatible vendors add fields of their own (``reasoning_content`` on DeepSeek,
``reasoning`` on OpenRouter); extras are allowed and read where they matter.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class Usage(BaseModel):
    """Token usage statistics."""

    model_config = ConfigDict(extra="allow")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ResponseMessage(BaseModel):
    """Response message in choice."""

    model_config = ConfigDict(extra="allow")

    role: str = "assistant"
    content: Optional[str] = None
    reasoning: Optional[str] = None
    reasoning_content: Optional[str] = None
    tool_calls: Optional[List[Any]] = None
    function_call: Optional[Any] = None

    @property
    def reasoning_text(self) -> Optional[str]:
        return self.reasoning_content or self.reasoning

    @property
    def has_tool_call(self) -> bool:
        return bool(self.tool_calls) or self.function_call is not None


class Choice(BaseModel):
    """Non-streaming response choice."""

    model_config = ConfigDict(extra="allow")

    index: int = 0
    message: ResponseMessage
    finish_reason: Optional[str] = None


class ChatCompletionResponse(BaseModel):
    """OpenAI chat completion response."""

    model_config = ConfigDict(extra="allow")

    id: str
    object: str = "chat.completion"
    model: str
    choices: List[Choice]
    usage: Optional[Usage] = None


class DeltaContent(BaseModel):
    """Delta content for streaming."""

    model_config = ConfigDict(extra="allow")

    role: Optional[str] = None
    content: Optional[str] = None
    reasoning: Optional[str] = None
    reasoning_content: Optional[str] = None
    tool_calls: Optional[List[Any]] = None
    function_call: Optional[Any] = None

    @property
    def reasoning_text(self) -> Optional[str]:
        return self.reasoning_content or self.reasoning

    @property
    def has_tool_call(self) -> bool:
        return bool(self.tool_calls) or self.function_call is not None


class StreamChoice(BaseModel):
    """Streaming response choice."""

    model_config = ConfigDict(extra="allow")

    index: int = 0
    delta: DeltaContent = DeltaContent()
    finish_reason: Optional[str] = None


class ChatCompletionChunk(BaseModel):
    """OpenAI streaming chat completion chunk."""

    model_config = ConfigDict(extra="allow")

    id: str = ""
    object: str = "chat.completion.chunk"
    model: str = ""
    choices: List[StreamChoice] = []
    usage: Optional[Usage] = None


class EmbeddingData(BaseModel):
    """One embedding vector."""

    index: int = 0
    embedding: List[float]


class EmbeddingResponse(BaseModel):
    """OpenAI embeddings response."""

    model_config = ConfigDict(extra="allow")

    data: List[EmbeddingData]
    model: str = ""
    usage: Optional[Usage] = None
