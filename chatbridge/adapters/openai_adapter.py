"""OpenAI adapter - serves OpenAI and OpenAI-compatible Chat Completions APIs."""

import logging
from dataclasses import replace
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import httpx
import openai

from ..cancellation import run_cancellable
from ..config import settings
from ..exceptions import (
    APIKeyInvalidError,
    InvalidProviderConfigError,
    LLMError,
    UnsupportedContentTypeError,
    UnsupportedRequestShapeError,
)
from ..models.common import TokenUsage
from ..models.llm import (
    Choice,
    LLMOptions,
    LLMRequest,
    LLMRequestNonStreaming,
    LLMRequestStreaming,
    LLMResponseNonStreaming,
    LLMResponseStreaming,
    RequestMessage,
    ResponseDelta,
    ResponseMessage,
    StreamChoice,
)
from ..models.openai import (
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    ImageUrl,
    ImageUrlContent,
    Message,
    StreamOptions,
    TextContent,
)
from ..models.provider import ChatModel, LLMProvider, ProviderType
from ..utils.debug_logger import log_vendor_request, log_vendor_response
from .base import BaseLLMProvider, new_request_id, normalize_payload
from .image import resolve_image_reference
from .streaming import StreamState, drive_stream

logger = logging.getLogger(__name__)


def fold_openai_chunk(
    state: StreamState, raw_chunk: Dict[str, Any]
) -> Tuple[StreamState, Optional[LLMResponseStreaming]]:
    """Apply one Chat Completions stream chunk.

    Usage arrives once, cumulative, on a chunk without choices when
    ``stream_options.include_usage`` is set; it replaces the running usage.
    """
    chunk = ChatCompletionChunk.model_validate(raw_chunk)

    if not state.message_id and chunk.id:
        state = replace(state, message_id=chunk.id, model_name=chunk.model)
    if chunk.usage is not None:
        state = replace(
            state,
            usage=TokenUsage(
                input_tokens=chunk.usage.prompt_tokens,
                output_tokens=chunk.usage.completion_tokens,
            ),
        )

    choices = []
    for choice in chunk.choices:
        delta = choice.delta
        if delta.has_tool_call:
            raise UnsupportedContentTypeError("Unsupported content type: tool_calls")
        reasoning = delta.reasoning_text
        if not delta.content and not reasoning and choice.finish_reason is None:
            continue
        choices.append(
            StreamChoice(
                finish_reason=choice.finish_reason,
                delta=ResponseDelta(content=delta.content or None, reasoning=reasoning or None),
            )
        )

    if not choices:
        return state, None
    return (
        state,
        LLMResponseStreaming(id=state.message_id, model=state.model_name, choices=choices),
    )


class OpenAIProvider(BaseLLMProvider):
    """Adapter for OpenAI and OpenAI-compatible vendors."""

    provider_types = (ProviderType.OPENAI, ProviderType.OPENAI_COMPATIBLE)
    vendor_name = "OpenAI"

    SUPPORTED_IMAGE_TYPES = settings.OPENAI_SUPPORTED_IMAGE_TYPES

    def __init__(
        self,
        provider: LLMProvider,
        client: Optional[Any] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(provider)
        if provider.type == ProviderType.OPENAI_COMPATIBLE and not self.base_url:
            raise InvalidProviderConfigError(
                f"Provider {provider.id} is OpenAI-compatible and needs a base URL"
            )
        self._client = client
        self._http_client = http_client

    @property
    def client(self):
        """Lazy-init OpenAI client (only on first API call)."""
        if self._client is None:
            self._client = openai.AsyncOpenAI(
                api_key=self.provider.api_key,
                base_url=self.base_url,
            )
        return self._client

    async def generate_response(
        self,
        model: ChatModel,
        request: LLMRequestNonStreaming,
        options: Optional[LLMOptions] = None,
    ) -> LLMResponseNonStreaming:
        self.check_model(model)
        self.check_stream_flag(request, streaming=False)
        self.check_api_key()
        payload = await self.build_request(model, request, stream=False)

        request_id = new_request_id()
        log_vendor_request(request_id, self.provider_id, payload)
        logger.debug(
            f"[{request_id}] {self.provider_id} request: model={payload['model']}, "
            f"messages={len(payload['messages'])}"
        )

        cancel_token = options.cancel_token if options else None
        try:
            response = await run_cancellable(
                self.client.chat.completions.create(**payload), cancel_token
            )
        except openai.AuthenticationError as e:
            raise self.classify_auth_error(e) from e

        body = normalize_payload(response)
        log_vendor_response(request_id, self.provider_id, body)
        return self.parse_non_streaming_response(ChatCompletionResponse.model_validate(body))

    async def stream_response(
        self,
        model: ChatModel,
        request: LLMRequestStreaming,
        options: Optional[LLMOptions] = None,
    ) -> AsyncIterator[LLMResponseStreaming]:
        self.check_model(model)
        self.check_stream_flag(request, streaming=True)
        self.check_api_key()
        payload = await self.build_request(model, request, stream=True)

        request_id = new_request_id()
        log_vendor_request(request_id, self.provider_id, payload)
        logger.debug(
            f"[{request_id}] {self.provider_id} stream: model={payload['model']}, "
            f"messages={len(payload['messages'])}"
        )

        cancel_token = options.cancel_token if options else None
        try:
            stream = await run_cancellable(
                self.client.chat.completions.create(**payload), cancel_token
            )
        except openai.AuthenticationError as e:
            raise self.classify_auth_error(e) from e

        return drive_stream(stream, fold_openai_chunk, cancel_token, request_id)

    async def get_embedding(self, model: str, text: str) -> List[float]:
        self.check_api_key()
        try:
            response = await self.client.embeddings.create(
                **EmbeddingRequest(model=model, input=text).to_payload()
            )
        except openai.AuthenticationError as e:
            raise self.classify_auth_error(e) from e

        body = EmbeddingResponse.model_validate(normalize_payload(response))
        if not body.data:
            raise LLMError(f"Provider {self.provider_id} returned no embedding for model {model}")
        return body.data[0].embedding

    # --- Request translation ---

    async def build_request(
        self, model: ChatModel, request: LLMRequest, stream: bool
    ) -> Dict[str, Any]:
        """Build ``chat.completions.create`` keyword arguments."""
        messages = [await self.parse_request_message(m) for m in request.messages]

        return ChatCompletionRequest(
            model=request.model,
            messages=messages,
            max_tokens=request.max_tokens,
            temperature=request.temperature,
            top_p=request.top_p,
            frequency_penalty=request.frequency_penalty,
            presence_penalty=request.presence_penalty,
            logit_bias=request.logit_bias,
            prediction=request.prediction,
            reasoning_effort=request.reasoning_effort or model.reasoning_effort,
            web_search_options=request.web_search_options,
            stream=True if stream else None,
            stream_options=(
                StreamOptions(include_usage=True)
                if stream and self.provider.include_usage
                else None
            ),
        ).to_payload()

    async def parse_request_message(self, message: RequestMessage) -> Message:
        if isinstance(message.content, str):
            return Message(role=message.role, content=message.content)

        if message.role != "user":
            raise UnsupportedRequestShapeError(
                f"{self.vendor_name} only supports content parts in user messages"
            )

        parts = []
        for part in message.content:
            if part.type == "text":
                parts.append(TextContent(text=part.text))
            elif part.type == "image_url":
                image = await resolve_image_reference(part.image_url.url, self._http_client)
                self.validate_image_type(image.mime_type, self.SUPPORTED_IMAGE_TYPES)
                parts.append(ImageUrlContent(image_url=ImageUrl(url=image.to_data_url())))
        return Message(role="user", content=parts)

    # --- Response translation ---

    @staticmethod
    def parse_non_streaming_response(response: ChatCompletionResponse) -> LLMResponseNonStreaming:
        choices = []
        for choice in response.choices:
            if choice.message.has_tool_call:
                raise UnsupportedContentTypeError("Unsupported content type: tool_calls")
            choices.append(
                Choice(
                    finish_reason=choice.finish_reason,
                    message=ResponseMessage(
                        role=choice.message.role,
                        content=choice.message.content,
                        reasoning=choice.message.reasoning_text,
                    ),
                )
            )

        usage = None
        if response.usage is not None:
            usage = TokenUsage(
                input_tokens=response.usage.prompt_tokens,
                output_tokens=response.usage.completion_tokens,
            ).to_usage()

        return LLMResponseNonStreaming(
            id=response.id,
            model=response.model,
            choices=choices,
            usage=usage,
        )

    def classify_auth_error(self, error: openai.AuthenticationError) -> APIKeyInvalidError:
        logger.warning(f"Provider {self.provider_id} API key rejected")
        return APIKeyInvalidError(
            f"Provider {self.provider_id} API key is invalid. Please update it in settings menu.",
            error,
        )
