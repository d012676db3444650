"""Models listing route."""

import logging

from fastapi import APIRouter

from ..models.api import ModelInfo, ModelListResponse
from .chat import get_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Models"])


@router.get("/models", response_model=ModelListResponse)
async def list_models():
    """
    List configured chat models.

    Returns models in OpenAI-compatible format, owned by their provider id.
    """
    models = [
        ModelInfo(id=model.id, owned_by=model.provider_id)
        for model in get_manager().list_chat_models()
    ]

    return ModelListResponse(data=models)


@router.get("/models/{model_id}", response_model=ModelInfo)
async def get_model(model_id: str):
    """
    Get information about a specific chat model.

    Args:
        model_id: The chat model id
    """
    model = get_manager().get_chat_model(model_id)
    return ModelInfo(id=model.id, owned_by=model.provider_id)
