"""Anthropic adapter - translates canonical requests to the Messages API and back."""

import logging
from dataclasses import replace
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import anthropic
import httpx

from ..cancellation import run_cancellable
from ..config import settings
from ..exceptions import (
    APIKeyInvalidError,
    EmbeddingsNotSupportedError,
    UnsupportedContentTypeError,
    UnsupportedRequestShapeError,
)
from ..models.anthropic import (
    Base64ImageSource,
    ContentBlockDelta,
    ImageBlock,
    Message,
    MessageDelta,
    MessagesRequest,
    MessagesResponse,
    MessageStart,
    TextBlock,
    ThinkingConfig,
    parse_stream_event,
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
from ..models.provider import ChatModel, LLMProvider, ProviderType
from ..utils.debug_logger import log_vendor_request, log_vendor_response
from .base import BaseLLMProvider, is_message_empty, new_request_id, normalize_payload
from .image import resolve_image_reference
from .streaming import StreamState, drive_stream

logger = logging.getLogger(__name__)


def fold_anthropic_event(
    state: StreamState, raw_event: Dict[str, Any]
) -> Tuple[StreamState, Optional[LLMResponseStreaming]]:
    """Apply one Messages API stream event.

    message_start seeds the state, content_block_delta yields one chunk,
    message_delta adds output tokens. Everything else is ignored.
    """
    event = parse_stream_event(raw_event)

    if isinstance(event, MessageStart):
        message = event.message
        return (
            StreamState(
                message_id=message.id,
                model_name=message.model,
                usage=TokenUsage(
                    input_tokens=message.usage.input_tokens,
                    output_tokens=message.usage.output_tokens,
                ),
            ),
            None,
        )

    if isinstance(event, ContentBlockDelta):
        delta = event.delta
        if delta.type == "text_delta":
            content = ResponseDelta(content=delta.text)
        elif delta.type == "thinking_delta":
            content = ResponseDelta(reasoning=delta.thinking)
        elif delta.type == "input_json_delta":
            raise UnsupportedContentTypeError("Unsupported content type: input_json_delta")
        else:
            # signature_delta, citations_delta
            return state, None
        return (
            state,
            LLMResponseStreaming(
                id=state.message_id,
                model=state.model_name,
                choices=[StreamChoice(finish_reason=None, delta=content)],
            ),
        )

    if isinstance(event, MessageDelta):
        return replace(state, usage=state.usage.add_output(event.usage.output_tokens)), None

    return state, None


class AnthropicProvider(BaseLLMProvider):
    """Adapter for the Anthropic Messages API."""

    provider_types = (ProviderType.ANTHROPIC,)
    vendor_name = "Anthropic"

    DEFAULT_MAX_TOKENS = settings.ANTHROPIC_DEFAULT_MAX_TOKENS
    SUPPORTED_IMAGE_TYPES = settings.ANTHROPIC_SUPPORTED_IMAGE_TYPES

    def __init__(
        self,
        provider: LLMProvider,
        client: Optional[Any] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            provider: Credential record; the API key may still be empty.
            client: Messages API transport, created on first use when omitted.
            http_client: Client used to download images given as http(s) URLs.
        """
        super().__init__(provider)
        self._client = client
        self._http_client = http_client

    @property
    def client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
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
            f"[{request_id}] Anthropic request: model={payload['model']}, "
            f"messages={len(payload['messages'])}, max_tokens={payload['max_tokens']}"
        )

        cancel_token = options.cancel_token if options else None
        try:
            response = await run_cancellable(self.client.messages.create(**payload), cancel_token)
        except anthropic.AuthenticationError as e:
            raise self.classify_auth_error(e) from e

        body = normalize_payload(response)
        log_vendor_response(request_id, self.provider_id, body)
        return self.parse_non_streaming_response(MessagesResponse.model_validate(body))

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
            f"[{request_id}] Anthropic stream: model={payload['model']}, "
            f"messages={len(payload['messages'])}, max_tokens={payload['max_tokens']}"
        )

        cancel_token = options.cancel_token if options else None
        try:
            stream = await run_cancellable(self.client.messages.create(**payload), cancel_token)
        except anthropic.AuthenticationError as e:
            raise self.classify_auth_error(e) from e

        return drive_stream(stream, fold_anthropic_event, cancel_token, request_id)

    async def get_embedding(self, model: str, text: str) -> List[float]:
        raise EmbeddingsNotSupportedError(
            f"Provider {self.provider_id} does not support embeddings. Please use a different provider."
        )

    # --- Request translation ---

    async def build_request(
        self, model: ChatModel, request: LLMRequest, stream: bool
    ) -> Dict[str, Any]:
        """Build ``messages.create`` keyword arguments."""
        system = self.validate_system_messages(request.messages)
        messages = [
            await self.parse_request_message(m)
            for m in request.messages
            if m.role != "system" and not is_message_empty(m)
        ]

        max_tokens = request.max_tokens
        if max_tokens is None:
            max_tokens = self.DEFAULT_MAX_TOKENS
            if model.thinking:
                max_tokens += model.thinking.budget_tokens

        return MessagesRequest(
            model=request.model,
            messages=messages,
            system=system,
            thinking=(
                ThinkingConfig(budget_tokens=model.thinking.budget_tokens)
                if model.thinking
                else None
            ),
            max_tokens=max_tokens,
            temperature=request.temperature,
            top_p=request.top_p,
            stream=True if stream else None,
        ).to_payload()

    async def parse_request_message(self, message: RequestMessage) -> Message:
        if message.role not in ("user", "assistant"):
            raise UnsupportedRequestShapeError(f"Anthropic does not support role: {message.role}")

        if isinstance(message.content, str):
            return Message(role=message.role, content=message.content)

        if message.role != "user":
            raise UnsupportedRequestShapeError(
                "Anthropic only supports content parts in user messages"
            )

        blocks = []
        for part in message.content:
            if part.type == "text":
                blocks.append(TextBlock(text=part.text))
            elif part.type == "image_url":
                image = await resolve_image_reference(part.image_url.url, self._http_client)
                self.validate_image_type(image.mime_type, self.SUPPORTED_IMAGE_TYPES)
                blocks.append(
                    ImageBlock(
                        source=Base64ImageSource(
                            media_type=image.mime_type,
                            data=image.base64_data,
                        )
                    )
                )
        return Message(role="user", content=blocks)

    @staticmethod
    def validate_system_messages(messages: List[RequestMessage]) -> Optional[str]:
        """Return the sole system message content, if any."""
        system_messages = [m for m in messages if m.role == "system"]
        if len(system_messages) > 1:
            raise UnsupportedRequestShapeError(
                "Anthropic does not support more than one system message"
            )
        if not system_messages:
            return None
        content = system_messages[0].content
        if not isinstance(content, str):
            raise UnsupportedRequestShapeError(
                "Anthropic only supports string content for system messages"
            )
        return content

    # --- Response translation ---

    @staticmethod
    def parse_non_streaming_response(response: MessagesResponse) -> LLMResponseNonStreaming:
        if response.content and response.content[0].type == "tool_use":
            raise UnsupportedContentTypeError("Unsupported content type: tool_use")

        text_content = "".join(
            block.text or "" for block in response.content if block.type == "text"
        )
        reasoning_content = "".join(
            block.thinking or "" for block in response.content if block.type == "thinking"
        )

        return LLMResponseNonStreaming(
            id=response.id,
            model=response.model,
            choices=[
                Choice(
                    finish_reason=response.stop_reason,
                    message=ResponseMessage(
                        role=response.role,
                        content=text_content,
                        reasoning=reasoning_content or None,
                    ),
                )
            ],
            usage=TokenUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            ).to_usage(),
        )

    def classify_auth_error(self, error: anthropic.AuthenticationError) -> APIKeyInvalidError:
        """Map a rejected credential to ``APIKeyInvalidError``.

        New individual Anthropic accounts get a CORS restriction that surfaces as
        an authentication failure even with a valid key; creating an
        organization lifts it.
        """
        detail = f"{error.message} {error.body or ''}"
        if settings.ANTHROPIC_CORS_ERROR_MARKER in detail:
            logger.warning(f"Provider {self.provider_id} rejected by Anthropic CORS policy")
            return APIKeyInvalidError(
                f"Provider {self.provider_id} is experiencing a CORS issue. "
                "This is a known issue with new individual Anthropic accounts.\n\n"
                "To resolve this issue:\n\n"
                f"1. Go to {settings.ANTHROPIC_ORGANIZATION_URL}\n"
                "2. Create a new organization\n"
                "3. Your API key should work properly after creating an organization",
                error,
                is_cors_restriction=True,
            )

        logger.warning(f"Provider {self.provider_id} API key rejected by Anthropic")
        return APIKeyInvalidError(
            f"Provider {self.provider_id} API key is invalid. Please update it in settings menu.",
            error,
        )
