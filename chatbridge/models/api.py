"""Shapes served by the local HTTP API (OpenAI-compatible)."""

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field


class ModelInfo(BaseModel):
    """Model information."""

    id: str
    object: Literal["model"] = "model"
    created: int = Field(default_factory=lambda: int(datetime.now().timestamp()))
    owned_by: str


class ModelListResponse(BaseModel):
    """Model list response."""

    object: Literal["list"] = "list"
    data: List[ModelInfo]


class EmbeddingsRequest(BaseModel):
    """Embedding request; ``model`` is a configured embedding-model id."""

    model: str
    input: str


class EmbeddingObject(BaseModel):
    """One embedding vector."""

    object: Literal["embedding"] = "embedding"
    index: int = 0
    embedding: List[float]


class EmbeddingListResponse(BaseModel):
    """Embedding response."""

    object: Literal["list"] = "list"
    data: List[EmbeddingObject]
    model: str
