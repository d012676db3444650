"""Anthropic content blocks sent in Messages API requests."""

from typing import Literal, Union

from pydantic import BaseModel


# =============================================================================
# Text Block
# =============================================================================


class TextBlock(BaseModel):
    """Anthropic text content block."""

    type: Literal["text"] = "text"
    text: str


# =============================================================================
# Image Block
# =============================================================================


class Base64ImageSource(BaseModel):
    """Anthropic base64 image source."""

    type: Literal["base64"] = "base64"
    media_type: Literal["image/jpeg", "image/png", "image/gif", "image/webp"]
    data: str


class ImageBlock(BaseModel):
    """Anthropic image content block."""

    type: Literal["image"] = "image"
    source: Base64ImageSource


# =============================================================================
# Union Type
# =============================================================================


ContentBlock = Union[TextBlock, ImageBlock]
