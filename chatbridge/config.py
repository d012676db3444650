"""Configuration management for chatbridge."""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .models.provider import ChatModel, EmbeddingModel, LLMProvider, ProviderType

load_dotenv()

logger = logging.getLogger(__name__)


class ModelsFile(BaseModel):
    """Layout of the optional ``MODELS_FILE`` JSON document."""

    model_config = ConfigDict(populate_by_name=True)

    providers: List[LLMProvider] = Field(default_factory=list)
    chat_models: List[ChatModel] = Field(default_factory=list, alias="chatModels")
    embedding_models: List[EmbeddingModel] = Field(default_factory=list, alias="embeddingModels")


class Settings:
    """Application settings."""

    # Server
    PORT: int = int(os.getenv("PORT", "8790"))
    HOST: str = os.getenv("HOST", "0.0.0.0")

    # Provider credentials
    ANTHROPIC_API_KEY: Optional[str] = os.getenv("ANTHROPIC_API_KEY")
    ANTHROPIC_BASE_URL: Optional[str] = os.getenv("ANTHROPIC_BASE_URL")
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    OPENAI_BASE_URL: Optional[str] = os.getenv("OPENAI_BASE_URL")
    OPENAI_COMPATIBLE_API_KEY: Optional[str] = os.getenv("OPENAI_COMPATIBLE_API_KEY")
    OPENAI_COMPATIBLE_BASE_URL: Optional[str] = os.getenv("OPENAI_COMPATIBLE_BASE_URL")
    # Some compatible backends reject stream_options
    OPENAI_COMPATIBLE_STREAM_USAGE: bool = (
        os.getenv("OPENAI_COMPATIBLE_STREAM_USAGE", "true").lower() == "true"
    )

    # Optional JSON file with providers, chatModels and embeddingModels
    MODELS_FILE: Optional[str] = os.getenv("MODELS_FILE")

    # Image references given as http(s) URLs are downloaded before sending
    IMAGE_FETCH_TIMEOUT: float = float(os.getenv("IMAGE_FETCH_TIMEOUT", "60"))

    # Anthropic
    # max_tokens floor when the request leaves it unset; a thinking budget is added on top
    ANTHROPIC_DEFAULT_MAX_TOKENS: int = 8192
    ANTHROPIC_SUPPORTED_IMAGE_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
    ]
    ANTHROPIC_CORS_ERROR_MARKER: str = "CORS requests are not allowed for this Organization"
    ANTHROPIC_ORGANIZATION_URL: str = "https://console.anthropic.com/settings/organization"

    # OpenAI
    OPENAI_SUPPORTED_IMAGE_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
    ]

    # Debug
    DEBUG_MODE: bool = os.getenv("DEBUG_MODE", "false").lower() == "true"
    DEBUG_LOG_PAYLOADS: bool = os.getenv("DEBUG_LOG_PAYLOADS", "false").lower() == "true"
    DEBUG_LOG_MAX_LENGTH: int = int(os.getenv("DEBUG_LOG_MAX_LENGTH", "0"))

    # Logging
    LOG_TO_FILE: bool = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")
    LOG_FILE: str = os.getenv("LOG_FILE", "chatbridge.log")

    # Built-in catalog used when no MODELS_FILE is configured
    DEFAULT_CHAT_MODELS: List[dict] = [
        {"id": "claude-sonnet-4.5", "providerType": "anthropic", "providerId": "anthropic",
         "model": "claude-sonnet-4-5"},
        {"id": "claude-sonnet-4.5-thinking", "providerType": "anthropic", "providerId": "anthropic",
         "model": "claude-sonnet-4-5", "thinking": {"budget_tokens": 8192}},
        {"id": "claude-haiku-4.5", "providerType": "anthropic", "providerId": "anthropic",
         "model": "claude-haiku-4-5"},
        {"id": "gpt-4.1", "providerType": "openai", "providerId": "openai", "model": "gpt-4.1"},
        {"id": "gpt-4.1-mini", "providerType": "openai", "providerId": "openai", "model": "gpt-4.1-mini"},
        {"id": "o3-mini", "providerType": "openai", "providerId": "openai", "model": "o3-mini",
         "reasoning_effort": "medium"},
    ]
    DEFAULT_EMBEDDING_MODELS: List[dict] = [
        {"id": "openai/text-embedding-3-small", "providerType": "openai", "providerId": "openai",
         "model": "text-embedding-3-small", "dimension": 1536},
    ]

    def _read_models_file(self) -> Optional[ModelsFile]:
        if not self.MODELS_FILE:
            return None
        path = Path(self.MODELS_FILE)
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        logger.info(f"Loaded model configuration from {path}")
        return ModelsFile.model_validate(data)

    def load_providers(self) -> List[LLMProvider]:
        """Provider credential records."""
        models_file = self._read_models_file()
        if models_file and models_file.providers:
            return models_file.providers

        providers = [
            LLMProvider(
                id="anthropic",
                type=ProviderType.ANTHROPIC,
                api_key=self.ANTHROPIC_API_KEY,
                base_url=self.ANTHROPIC_BASE_URL,
            ),
            LLMProvider(
                id="openai",
                type=ProviderType.OPENAI,
                api_key=self.OPENAI_API_KEY,
                base_url=self.OPENAI_BASE_URL,
            ),
        ]
        if self.OPENAI_COMPATIBLE_BASE_URL:
            providers.append(
                LLMProvider(
                    id="openai-compatible",
                    type=ProviderType.OPENAI_COMPATIBLE,
                    api_key=self.OPENAI_COMPATIBLE_API_KEY,
                    base_url=self.OPENAI_COMPATIBLE_BASE_URL,
                    include_usage=self.OPENAI_COMPATIBLE_STREAM_USAGE,
                )
            )
        return providers

    def load_chat_models(self) -> List[ChatModel]:
        """Configured chat models."""
        models_file = self._read_models_file()
        if models_file and models_file.chat_models:
            return models_file.chat_models
        return [ChatModel.model_validate(m) for m in self.DEFAULT_CHAT_MODELS]

    def load_embedding_models(self) -> List[EmbeddingModel]:
        """Configured embedding models."""
        models_file = self._read_models_file()
        if models_file and models_file.embedding_models:
            return models_file.embedding_models
        return [EmbeddingModel.model_validate(m) for m in self.DEFAULT_EMBEDDING_MODELS]


settings = Settings()
