"""Dispatches canonical calls to the adapter configured for each model."""

import logging
from typing import AsyncIterator, Iterable, List, Optional

from ..config import Settings
from ..exceptions import ModelNotFoundError
from ..models.llm import (
    LLMOptions,
    LLMRequestNonStreaming,
    LLMRequestStreaming,
    LLMResponseNonStreaming,
    LLMResponseStreaming,
)
from ..models.provider import ChatModel, EmbeddingModel
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)


class LLMManager:
    """Entry point for callers: resolves models and forwards to their adapter.

    Holds no per-call state, so one instance serves concurrent calls.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        chat_models: Iterable[ChatModel] = (),
        embedding_models: Iterable[EmbeddingModel] = (),
    ):
        self.registry = registry
        self._chat_models = {m.id: m for m in chat_models}
        self._embedding_models = {m.id: m for m in embedding_models}

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMManager":
        registry = ProviderRegistry.from_providers(settings.load_providers())
        manager = cls(
            registry,
            chat_models=settings.load_chat_models(),
            embedding_models=settings.load_embedding_models(),
        )
        logger.info(
            f"Loaded providers {registry.ids()} with "
            f"{len(manager._chat_models)} chat models, "
            f"{len(manager._embedding_models)} embedding models"
        )
        return manager

    # --- Model lookup ---

    def list_chat_models(self) -> List[ChatModel]:
        return [m for m in self._chat_models.values() if m.enable]

    def get_chat_model(self, model_id: str) -> ChatModel:
        model = self._chat_models.get(model_id)
        if model is None:
            raise ModelNotFoundError(f"Chat model '{model_id}' is not configured")
        return model

    def get_embedding_model(self, model_id: str) -> EmbeddingModel:
        model = self._embedding_models.get(model_id)
        if model is None:
            raise ModelNotFoundError(f"Embedding model '{model_id}' is not configured")
        return model

    # --- Calls ---

    async def generate_response(
        self,
        model: ChatModel,
        request: LLMRequestNonStreaming,
        options: Optional[LLMOptions] = None,
    ) -> LLMResponseNonStreaming:
        adapter = self.registry.get(model.provider_id)
        return await adapter.generate_response(model, request, options)

    async def stream_response(
        self,
        model: ChatModel,
        request: LLMRequestStreaming,
        options: Optional[LLMOptions] = None,
    ) -> AsyncIterator[LLMResponseStreaming]:
        adapter = self.registry.get(model.provider_id)
        return await adapter.stream_response(model, request, options)

    async def get_embedding(self, model: EmbeddingModel, text: str) -> List[float]:
        adapter = self.registry.get(model.provider_id)
        return await adapter.get_embedding(model.model, text)
