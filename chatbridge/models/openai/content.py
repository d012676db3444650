"""OpenAI content types for chat messages."""

from typing import Literal, Union

from pydantic import BaseModel


class TextContent(BaseModel):
    """Text content block."""

    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    """Image URL, always inline once resolved."""

    url: str


class ImageUrlContent(BaseModel):
    """Image URL content block."""

    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


ContentPart = Union[TextContent, ImageUrlContent]
