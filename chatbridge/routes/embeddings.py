"""Embedding routes."""

import logging

from fastapi import APIRouter

from ..models.api import EmbeddingListResponse, EmbeddingObject, EmbeddingsRequest
from .chat import get_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Embeddings"])


@router.post("/embeddings", response_model=EmbeddingListResponse)
async def create_embedding(request: EmbeddingsRequest):
    """Embed ``input`` with a configured embedding model."""
    manager = get_manager()
    model = manager.get_embedding_model(request.model)
    vector = await manager.get_embedding(model, request.input)
    logger.debug(f"Embedded {len(request.input)} chars with {model.id} ({len(vector)} dims)")
    return EmbeddingListResponse(
        data=[EmbeddingObject(embedding=vector)],
        model=request.model,
    )
