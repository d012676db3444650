"""Provider credential and model configuration records.

These records are owned by the settings layer; adapters only read them.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderType(str, Enum):
    """Vendor tag used to select an adapter."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    OPENAI_COMPATIBLE = "openai-compatible"


class LLMProvider(BaseModel):
    """Credentials and endpoint for one configured vendor account."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: ProviderType
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    base_url: Optional[str] = Field(default=None, alias="baseUrl")
    # OpenAI family: ask for usage on streams via stream_options.include_usage
    include_usage: bool = Field(default=True, alias="includeUsage")


class ThinkingConfig(BaseModel):
    """Extended thinking budget (Anthropic)."""

    budget_tokens: int = Field(default=8192, ge=1024)


class ChatModel(BaseModel):
    """A chat model as configured by the user."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    id: str
    provider_type: ProviderType = Field(alias="providerType")
    provider_id: str = Field(alias="providerId")
    model: str
    enable: bool = True

    # Anthropic
    thinking: Optional[ThinkingConfig] = None
    # OpenAI reasoning models
    reasoning_effort: Optional[Literal["low", "medium", "high"]] = None


class EmbeddingModel(BaseModel):
    """An embedding model as configured by the user."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    id: str
    provider_type: ProviderType = Field(alias="providerType")
    provider_id: str = Field(alias="providerId")
    model: str
    dimension: Optional[int] = None
