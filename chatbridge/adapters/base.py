"""Provider adapter contract and helpers shared by the vendor adapters."""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, ClassVar, Dict, List, Optional, Sequence

import httpx

from ..exceptions import (
    APIKeyNotSetError,
    InvalidProviderConfigError,
    ModelProviderMismatchError,
    UnsupportedImageTypeError,
    UnsupportedRequestShapeError,
)
from ..models.llm import (
    LLMOptions,
    LLMRequest,
    LLMRequestNonStreaming,
    LLMRequestStreaming,
    LLMResponseNonStreaming,
    LLMResponseStreaming,
    RequestMessage,
)
from ..models.provider import ChatModel, LLMProvider, ProviderType

logger = logging.getLogger(__name__)


def normalize_base_url(base_url: Optional[str]) -> Optional[str]:
    """Strip trailing slashes and reject anything but an absolute http(s) URL."""
    if not base_url:
        return None
    stripped = base_url.strip().rstrip("/")
    try:
        url = httpx.URL(stripped)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidProviderConfigError(f"Invalid base URL {base_url!r}: {e}", e) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidProviderConfigError(
            f"Invalid base URL {base_url!r}: expected an absolute http(s) URL"
        )
    return stripped


def normalize_payload(obj: Any) -> Dict[str, Any]:
    """Convert a vendor SDK object to a plain dictionary."""
    if isinstance(obj, dict):
        return obj
    elif hasattr(obj, "model_dump"):
        return obj.model_dump()
    elif hasattr(obj, "to_dict"):
        return obj.to_dict()
    return vars(obj)


def is_message_empty(message: RequestMessage) -> bool:
    """Whitespace-only text or an empty part list."""
    if isinstance(message.content, str):
        return message.content.strip() == ""
    return len(message.content) == 0


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class BaseLLMProvider(ABC):
    """Translation contract implemented once per vendor.

    Construction only stores configuration; a missing API key is reported per
    call so adapters can be built before credentials are entered.
    """

    provider_types: ClassVar[Sequence[ProviderType]] = ()
    vendor_name: ClassVar[str] = ""

    def __init__(self, provider: LLMProvider):
        if provider.type not in self.provider_types:
            raise InvalidProviderConfigError(
                f"Provider {provider.id} has type {provider.type.value}, "
                f"which {type(self).__name__} does not serve"
            )
        self.provider = provider
        self.base_url = normalize_base_url(provider.base_url)

    @property
    def provider_id(self) -> str:
        return self.provider.id

    @abstractmethod
    async def generate_response(
        self,
        model: ChatModel,
        request: LLMRequestNonStreaming,
        options: Optional[LLMOptions] = None,
    ) -> LLMResponseNonStreaming:
        """Send a request and return the complete response."""

    @abstractmethod
    async def stream_response(
        self,
        model: ChatModel,
        request: LLMRequestStreaming,
        options: Optional[LLMOptions] = None,
    ) -> AsyncIterator[LLMResponseStreaming]:
        """Open a vendor stream and return an iterator of canonical chunks.

        Validation, credential and transport-start errors are raised here, before
        the iterator is returned.
        """

    @abstractmethod
    async def get_embedding(self, model: str, text: str) -> List[float]:
        """Embed ``text`` with ``model``."""

    # --- Per-call validation ---

    def check_model(self, model: ChatModel) -> None:
        if model.provider_type != self.provider.type:
            raise ModelProviderMismatchError(
                f"Model {model.id} is a {model.provider_type.value} model, "
                f"but provider {self.provider_id} is {self.provider.type.value}"
            )

    def check_stream_flag(self, request: LLMRequest, streaming: bool) -> None:
        """``stream`` must match the method: True for streams, False or unset otherwise."""
        if bool(request.stream) != streaming:
            expected = "stream_response" if request.stream else "generate_response"
            raise UnsupportedRequestShapeError(
                f"Request has stream={request.stream}; use {expected} for this request"
            )

    def check_api_key(self) -> None:
        if not self.provider.api_key:
            raise APIKeyNotSetError(
                f"Provider {self.provider_id} API key is missing. Please set it in settings menu."
            )

    def validate_image_type(self, mime_type: str, supported_types: List[str]) -> None:
        if mime_type not in supported_types:
            raise UnsupportedImageTypeError(
                f"{self.vendor_name} does not support image type {mime_type}. "
                f"Supported types: {', '.join(supported_types)}",
                mime_type=mime_type,
                supported_types=supported_types,
            )
