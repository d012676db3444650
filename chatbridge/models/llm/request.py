"""Canonical chat request models.

Field names follow the OpenAI/OpenRouter chat completion parameters so that a
request can be handed to any provider adapter unchanged.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ...cancellation import CancellationToken
from .content import ContentPart


class RequestMessage(BaseModel):
    """Chat message. Content parts are only valid for the user role."""

    role: Literal["user", "assistant", "system"]
    content: Union[str, List[ContentPart]]


class LLMRequest(BaseModel):
    """Vendor-neutral chat request."""

    messages: List[RequestMessage]
    model: str

    # Sampling parameters
    max_tokens: Optional[int] = Field(default=None, ge=1)
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    top_p: Optional[float] = Field(default=None, gt=0, le=1)
    frequency_penalty: Optional[float] = Field(default=None, ge=-2, le=2)
    presence_penalty: Optional[float] = Field(default=None, ge=-2, le=2)
    logit_bias: Optional[Dict[str, float]] = None

    # OpenAI predicted outputs
    prediction: Optional[Dict[str, Any]] = None
    # OpenAI reasoning models
    reasoning_effort: Optional[Literal["low", "medium", "high"]] = None
    # OpenAI search models and Perplexity
    web_search_options: Optional[Dict[str, Any]] = None

    stream: Optional[bool] = False


class LLMRequestNonStreaming(LLMRequest):
    """Request answered with a single response."""

    stream: Optional[Literal[False]] = False


class LLMRequestStreaming(LLMRequest):
    """Request answered with a chunk stream."""

    stream: Literal[True] = True


class LLMOptions(BaseModel):
    """Per-call options."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    cancel_token: Optional[CancellationToken] = None
