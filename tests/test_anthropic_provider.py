"""Tests for the Anthropic adapter (non-streaming)."""

import anthropic
import httpx
import pytest

from chatbridge.adapters.anthropic_adapter import AnthropicProvider
from chatbridge.exceptions import (
    APIKeyInvalidError,
    APIKeyNotSetError,
    EmbeddingsNotSupportedError,
    InvalidProviderConfigError,
    ModelProviderMismatchError,
    UnsupportedContentTypeError,
    UnsupportedImageTypeError,
    UnsupportedRequestShapeError,
)
from chatbridge.models.provider import LLMProvider, ProviderType

from conftest import BMP_DATA_URL, PNG_DATA_URL, RED_PIXEL_PNG, anthropic_message, make_request


def status_error(cls, status: int, message: str, body=None):
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return cls(message, response=httpx.Response(status, request=request), body=body)


class TestSystemMessages:
    """Test system message extraction."""

    async def test_system_moves_to_top_level(self, anthropic_provider, anthropic_client, claude_model):
        request = make_request(
            {"role": "system", "content": "You are terse."},
            {"role": "user", "content": "Hi"},
        )
        await anthropic_provider.generate_response(claude_model, request)

        payload = anthropic_client.create.calls[0]
        assert payload["system"] == "You are terse."
        assert payload["messages"] == [{"role": "user", "content": "Hi"}]

    async def test_no_system_field_without_system_message(
        self, anthropic_provider, anthropic_client, claude_model
    ):
        await anthropic_provider.generate_response(
            claude_model, make_request({"role": "user", "content": "Hi"})
        )
        assert "system" not in anthropic_client.create.calls[0]

    async def test_two_system_messages_rejected_before_call(
        self, anthropic_provider, anthropic_client, claude_model
    ):
        request = make_request(
            {"role": "system", "content": "one"},
            {"role": "system", "content": "two"},
            {"role": "user", "content": "Hi"},
        )
        with pytest.raises(UnsupportedRequestShapeError):
            await anthropic_provider.generate_response(claude_model, request)
        assert anthropic_client.create.calls == []

    async def test_system_with_parts_rejected(self, anthropic_provider, anthropic_client, claude_model):
        request = make_request(
            {"role": "system", "content": [{"type": "text", "text": "rules"}]},
            {"role": "user", "content": "Hi"},
        )
        with pytest.raises(UnsupportedRequestShapeError):
            await anthropic_provider.generate_response(claude_model, request)
        assert anthropic_client.create.calls == []


class TestMessageTranslation:
    """Test message filtering and content parts."""

    async def test_empty_messages_dropped(self, anthropic_provider, anthropic_client, claude_model):
        request = make_request(
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "   "},
            {"role": "user", "content": []},
            {"role": "user", "content": "Still there?"},
        )
        await anthropic_provider.generate_response(claude_model, request)

        messages = anthropic_client.create.calls[0]["messages"]
        assert [m["content"] for m in messages] == ["Hi", "Still there?"]

    async def test_image_becomes_base64_block(
        self, anthropic_provider, anthropic_client, claude_model, multimodal_message
    ):
        await anthropic_provider.generate_response(claude_model, make_request(multimodal_message))

        content = anthropic_client.create.calls[0]["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "Describe this image briefly"}
        assert content[1] == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/png", "data": RED_PIXEL_PNG},
        }

    async def test_unsupported_image_type_rejected_before_call(
        self, anthropic_provider, anthropic_client, claude_model
    ):
        request = make_request(
            {"role": "user", "content": [{"type": "image_url", "image_url": {"url": BMP_DATA_URL}}]}
        )
        with pytest.raises(UnsupportedImageTypeError) as exc_info:
            await anthropic_provider.generate_response(claude_model, request)

        assert exc_info.value.mime_type == "image/bmp"
        assert "image/png" in exc_info.value.supported_types
        assert "Anthropic does not support image type image/bmp" in exc_info.value.message
        assert anthropic_client.create.calls == []

    async def test_assistant_parts_rejected(self, anthropic_provider, anthropic_client, claude_model):
        request = make_request(
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": [{"type": "text", "text": "Hello"}]},
        )
        with pytest.raises(UnsupportedRequestShapeError):
            await anthropic_provider.generate_response(claude_model, request)
        assert anthropic_client.create.calls == []


class TestMaxTokens:
    """Test the max_tokens floor and thinking budget."""

    async def test_default(self, anthropic_provider, anthropic_client, claude_model):
        await anthropic_provider.generate_response(
            claude_model, make_request({"role": "user", "content": "Hi"})
        )
        payload = anthropic_client.create.calls[0]
        assert payload["max_tokens"] == 8192
        assert "thinking" not in payload

    async def test_thinking_adds_budget(self, anthropic_provider, anthropic_client, claude_thinking_model):
        await anthropic_provider.generate_response(
            claude_thinking_model, make_request({"role": "user", "content": "Hi"})
        )
        payload = anthropic_client.create.calls[0]
        assert payload["max_tokens"] == 8192 + 4096
        assert payload["thinking"] == {"type": "enabled", "budget_tokens": 4096}

    async def test_explicit_max_tokens_wins(self, anthropic_provider, anthropic_client, claude_model):
        await anthropic_provider.generate_response(
            claude_model, make_request({"role": "user", "content": "Hi"}, max_tokens=256)
        )
        assert anthropic_client.create.calls[0]["max_tokens"] == 256

    async def test_sampling_parameters_forwarded(self, anthropic_provider, anthropic_client, claude_model):
        await anthropic_provider.generate_response(
            claude_model,
            make_request(
                {"role": "user", "content": "Hi"},
                temperature=0.2,
                top_p=0.9,
                frequency_penalty=1.0,
            ),
        )
        payload = anthropic_client.create.calls[0]
        assert payload["temperature"] == 0.2
        assert payload["top_p"] == 0.9
        assert "frequency_penalty" not in payload

    async def test_same_request_twice_builds_same_payload(
        self, anthropic_provider, anthropic_client, claude_model
    ):
        request = make_request({"role": "system", "content": "s"}, {"role": "user", "content": "Hi"})
        await anthropic_provider.generate_response(claude_model, request)
        await anthropic_provider.generate_response(claude_model, request)
        first, second = anthropic_client.create.calls
        assert first == second


class TestResponseTranslation:
    """Test vendor reply to canonical response."""

    async def test_text_and_usage(self, anthropic_provider, claude_model):
        response = await anthropic_provider.generate_response(
            claude_model, make_request({"role": "user", "content": "Hi"})
        )
        assert response.id == "msg_01"
        assert response.object == "chat.completion"
        assert response.model == "claude-sonnet-4-5"
        assert response.choices[0].message.content == "Hello!"
        assert response.choices[0].message.reasoning is None
        assert response.choices[0].finish_reason == "end_turn"
        assert response.usage.prompt_tokens == 12
        assert response.usage.completion_tokens == 5
        assert response.usage.total_tokens == 17

    async def test_text_and_thinking_concatenated(self, anthropic_provider, anthropic_client, claude_model):
        anthropic_client.create.response = anthropic_message(
            [
                {"type": "thinking", "thinking": "Let me ", "signature": "sig"},
                {"type": "thinking", "thinking": "think."},
                {"type": "text", "text": "Answer "},
                {"type": "text", "text": "here."},
            ]
        )
        response = await anthropic_provider.generate_response(
            claude_model, make_request({"role": "user", "content": "Hi"})
        )
        assert response.choices[0].message.content == "Answer here."
        assert response.choices[0].message.reasoning == "Let me think."

    async def test_tool_use_rejected(self, anthropic_provider, anthropic_client, claude_model):
        anthropic_client.create.response = anthropic_message(
            [{"type": "tool_use", "id": "tu_1", "name": "lookup", "input": {}}]
        )
        with pytest.raises(UnsupportedContentTypeError):
            await anthropic_provider.generate_response(
                claude_model, make_request({"role": "user", "content": "Hi"})
            )


class TestProviderChecks:
    """Test credential, model and configuration checks."""

    async def test_missing_api_key(self, anthropic_client, claude_model):
        provider = AnthropicProvider(
            LLMProvider(id="anthropic", type=ProviderType.ANTHROPIC), client=anthropic_client
        )
        with pytest.raises(APIKeyNotSetError) as exc_info:
            await provider.generate_response(claude_model, make_request({"role": "user", "content": "Hi"}))
        assert exc_info.value.message == (
            "Provider anthropic API key is missing. Please set it in settings menu."
        )
        assert anthropic_client.create.calls == []

    async def test_model_provider_mismatch(self, anthropic_provider, anthropic_client, gpt_model):
        with pytest.raises(ModelProviderMismatchError):
            await anthropic_provider.generate_response(
                gpt_model, make_request({"role": "user", "content": "Hi"})
            )
        assert anthropic_client.create.calls == []

    async def test_embeddings_not_supported(self, anthropic_provider):
        with pytest.raises(EmbeddingsNotSupportedError):
            await anthropic_provider.get_embedding("any-model", "text")

    def test_base_url_trailing_slash_stripped(self):
        provider = AnthropicProvider(
            LLMProvider(
                id="proxy",
                type=ProviderType.ANTHROPIC,
                api_key="k",
                base_url="https://proxy.example.com/anthropic/",
            )
        )
        assert provider.base_url == "https://proxy.example.com/anthropic"

    def test_invalid_base_url(self):
        with pytest.raises(InvalidProviderConfigError):
            AnthropicProvider(
                LLMProvider(id="proxy", type=ProviderType.ANTHROPIC, base_url="not a url")
            )

    def test_wrong_provider_type(self, openai_record):
        with pytest.raises(InvalidProviderConfigError):
            AnthropicProvider(openai_record)

    def test_client_created_lazily(self, anthropic_record):
        provider = AnthropicProvider(anthropic_record)
        assert provider._client is None
        assert isinstance(provider.client, anthropic.AsyncAnthropic)


class TestAuthErrors:
    """Test classification of vendor authentication failures."""

    async def test_cors_restriction(self, anthropic_provider, anthropic_client, claude_model):
        anthropic_client.create.error = status_error(
            anthropic.AuthenticationError,
            401,
            "Error code: 401",
            body={
                "type": "error",
                "error": {
                    "type": "authentication_error",
                    "message": "CORS requests are not allowed for this Organization because of...",
                },
            },
        )
        with pytest.raises(APIKeyInvalidError) as exc_info:
            await anthropic_provider.generate_response(
                claude_model, make_request({"role": "user", "content": "Hi"})
            )

        error = exc_info.value
        assert error.is_cors_restriction is True
        assert "CORS issue" in error.message
        assert "https://console.anthropic.com/settings/organization" in error.message
        assert isinstance(error.cause, anthropic.AuthenticationError)

    async def test_invalid_key(self, anthropic_provider, anthropic_client, claude_model):
        anthropic_client.create.error = status_error(
            anthropic.AuthenticationError, 401, "invalid x-api-key"
        )
        with pytest.raises(APIKeyInvalidError) as exc_info:
            await anthropic_provider.generate_response(
                claude_model, make_request({"role": "user", "content": "Hi"})
            )

        assert exc_info.value.is_cors_restriction is False
        assert exc_info.value.message == (
            "Provider anthropic API key is invalid. Please update it in settings menu."
        )

    async def test_other_vendor_errors_pass_through(
        self, anthropic_provider, anthropic_client, claude_model
    ):
        anthropic_client.create.error = status_error(anthropic.RateLimitError, 429, "rate limited")
        with pytest.raises(anthropic.RateLimitError):
            await anthropic_provider.generate_response(
                claude_model, make_request({"role": "user", "content": "Hi"})
            )


class TestImageAllowList:
    """The allow-list is the same for every Anthropic provider."""

    def test_supported_types(self):
        assert AnthropicProvider.SUPPORTED_IMAGE_TYPES == [
            "image/jpeg",
            "image/png",
            "image/gif",
            "image/webp",
        ]

    async def test_png_data_url_accepted(self, anthropic_provider, anthropic_client, claude_model):
        request = make_request(
            {"role": "user", "content": [{"type": "image_url", "image_url": {"url": PNG_DATA_URL}}]}
        )
        await anthropic_provider.generate_response(claude_model, request)
        assert len(anthropic_client.create.calls) == 1
