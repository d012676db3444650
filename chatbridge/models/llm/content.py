"""Canonical content parts for multi-part user messages."""

from typing import Literal, Union

from pydantic import BaseModel


class TextContent(BaseModel):
    """Text content part."""

    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    """Image reference."""

    url: str  # https://... or data:image/png;base64,...


class ImageUrlContent(BaseModel):
    """Image content part."""

    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


ContentPart = Union[TextContent, ImageUrlContent]
