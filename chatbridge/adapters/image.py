"""Image reference resolution shared by every provider adapter.

An image reference is either an embedded data URL
(``data:image/png;base64,...``) or an http(s) URL. Both resolve to the same
``ImageData`` pair; vendor allow-list checks are left to the adapters.
"""

import base64
import binascii
import logging
import mimetypes
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import settings
from ..exceptions import MalformedImageReferenceError

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:([\w.+-]+/[\w.+-]+)((?:;[\w-]+=[^;,]*)*);base64,(.*)$", re.DOTALL)


@dataclass(frozen=True)
class ImageData:
    """Decoded image: mime type plus raw bytes."""

    mime_type: str
    data: bytes

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


def guess_mime_type(filename: str) -> Optional[str]:
    """Guess mime type from a file name or URL path."""
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type


def _preview(reference: str) -> str:
    return reference if len(reference) <= 64 else reference[:64] + "..."


def parse_image_data_url(reference: str) -> ImageData:
    """Decode a base64 data URL into ``ImageData``.

    Raises:
        MalformedImageReferenceError: If the reference is not a base64 data URL
            or its payload is not valid base64.
    """
    match = DATA_URL_PATTERN.match(reference.strip())
    if not match:
        raise MalformedImageReferenceError(
            f"Invalid image data URL: {_preview(reference)}. "
            "Expected format: data:<mime-type>;base64,<data>"
        )

    mime_type = match.group(1).lower()
    payload = re.sub(r"\s+", "", match.group(3))
    if not payload:
        raise MalformedImageReferenceError("Image data URL has an empty payload")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedImageReferenceError(
            f"Image data URL payload is not valid base64: {e}", e
        ) from e

    return ImageData(mime_type=mime_type, data=data)


def is_http_url(reference: str) -> bool:
    try:
        url = httpx.URL(reference)
    except (httpx.InvalidURL, TypeError):
        return False
    return url.scheme in ("http", "https") and bool(url.host)


async def fetch_image(
    url: str, client: Optional[httpx.AsyncClient] = None
) -> ImageData:
    """Download an image and take its mime type from the response."""
    try:
        if client is None:
            async with httpx.AsyncClient(
                timeout=settings.IMAGE_FETCH_TIMEOUT, follow_redirects=True
            ) as own_client:
                response = await own_client.get(url)
        else:
            response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch image {url}: {e}")
        raise MalformedImageReferenceError(f"Image could not be fetched from {url}: {e}", e) from e

    content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
    mime_type = content_type or guess_mime_type(url.split("?")[0])
    if not mime_type:
        raise MalformedImageReferenceError(f"Could not determine image type of {url}")

    logger.debug(f"Fetched image {url} ({mime_type}, {len(response.content)} bytes)")
    return ImageData(mime_type=mime_type, data=response.content)


async def resolve_image_reference(
    reference: str, client: Optional[httpx.AsyncClient] = None
) -> ImageData:
    """Resolve a data URL or an http(s) URL into ``ImageData``."""
    if reference.startswith("data:"):
        return parse_image_data_url(reference)
    if is_http_url(reference):
        return await fetch_image(reference, client)
    raise MalformedImageReferenceError(
        f"Unsupported image reference: {_preview(reference)}. "
        "Use a data URL or an http(s) URL."
    )
