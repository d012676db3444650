"""Pytest configuration and fixtures for chatbridge tests."""

import asyncio
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from chatbridge.adapters.anthropic_adapter import AnthropicProvider
from chatbridge.adapters.openai_adapter import OpenAIProvider
from chatbridge.models.llm import LLMRequestNonStreaming, LLMRequestStreaming
from chatbridge.models.provider import ChatModel, EmbeddingModel, LLMProvider, ProviderType
from chatbridge.services.llm_manager import LLMManager
from chatbridge.services.registry import ProviderRegistry

# Small 1x1 red PNG in base64
RED_PIXEL_PNG = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="
PNG_DATA_URL = f"data:image/png;base64,{RED_PIXEL_PNG}"
BMP_DATA_URL = "data:image/bmp;base64,Qk0eAAAAAAAAABoAAAAMAAAAAQABAAEAGAAAAP8A"


# =============================================================================
# Fake vendor transports
# =============================================================================


class FakeStream:
    """Async iterator over canned vendor events that records being closed."""

    def __init__(self, events: List[Dict[str, Any]], hang_after: Optional[int] = None):
        self.events = list(events)
        self.hang_after = hang_after
        self.pulled = 0
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.hang_after is not None and self.pulled >= self.hang_after:
            # Block until the caller cancels the pull
            await asyncio.Event().wait()
        if self.pulled >= len(self.events):
            raise StopAsyncIteration
        event = self.events[self.pulled]
        self.pulled += 1
        return event

    async def close(self):
        self.closed = True


class FakeCreate:
    """Stands in for ``messages.create`` / ``chat.completions.create``."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.response: Any = None
        self.error: Optional[BaseException] = None

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeAnthropicClient:
    """Minimal shape of ``anthropic.AsyncAnthropic``."""

    def __init__(self):
        self.messages = type("Messages", (), {})()
        self.messages.create = FakeCreate()

    @property
    def create(self) -> FakeCreate:
        return self.messages.create


class FakeOpenAIClient:
    """Minimal shape of ``openai.AsyncOpenAI``."""

    def __init__(self):
        self.chat = type("Chat", (), {})()
        self.chat.completions = type("Completions", (), {})()
        self.chat.completions.create = FakeCreate()
        self.embeddings = type("Embeddings", (), {})()
        self.embeddings.create = FakeCreate()

    @property
    def create(self) -> FakeCreate:
        return self.chat.completions.create


# =============================================================================
# Canned vendor payloads
# =============================================================================


def anthropic_message(
    content: Optional[List[Dict[str, Any]]] = None,
    input_tokens: int = 12,
    output_tokens: int = 5,
) -> Dict[str, Any]:
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "model": "claude-sonnet-4-5",
        "content": content if content is not None else [{"type": "text", "text": "Hello!"}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
    }


def anthropic_stream_events(texts: List[str], output_tokens: int = 7) -> List[Dict[str, Any]]:
    events: List[Dict[str, Any]] = [
        {
            "type": "message_start",
            "message": {
                "id": "msg_stream",
                "model": "claude-sonnet-4-5",
                "usage": {"input_tokens": 10, "output_tokens": 1},
            },
        },
        {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
        {"type": "ping"},
    ]
    for text in texts:
        events.append(
            {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": text}}
        )
    events += [
        {"type": "content_block_stop", "index": 0},
        {"type": "message_delta", "delta": {"stop_reason": "end_turn"}, "usage": {"output_tokens": output_tokens}},
        {"type": "message_stop"},
    ]
    return events


def openai_completion(
    content: Optional[str] = "Hello!",
    **message_extra: Any,
) -> Dict[str, Any]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "model": "gpt-4.1",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content, **message_extra},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12},
    }


def openai_chunks(texts: List[str]) -> List[Dict[str, Any]]:
    chunks: List[Dict[str, Any]] = [
        {
            "id": "chatcmpl-s",
            "model": "gpt-4.1",
            "choices": [{"index": 0, "delta": {"role": "assistant", "content": ""}}],
        }
    ]
    for text in texts:
        chunks.append(
            {"id": "chatcmpl-s", "model": "gpt-4.1", "choices": [{"index": 0, "delta": {"content": text}}]}
        )
    chunks.append(
        {"id": "chatcmpl-s", "model": "gpt-4.1", "choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]}
    )
    chunks.append(
        {
            "id": "chatcmpl-s",
            "model": "gpt-4.1",
            "choices": [],
            "usage": {"prompt_tokens": 8, "completion_tokens": 4, "total_tokens": 12},
        }
    )
    return chunks


# =============================================================================
# Providers and models
# =============================================================================


@pytest.fixture
def anthropic_record() -> LLMProvider:
    return LLMProvider(id="anthropic", type=ProviderType.ANTHROPIC, api_key="sk-ant-test")


@pytest.fixture
def openai_record() -> LLMProvider:
    return LLMProvider(id="openai", type=ProviderType.OPENAI, api_key="sk-test")


@pytest.fixture
def anthropic_client() -> FakeAnthropicClient:
    client = FakeAnthropicClient()
    client.create.response = anthropic_message()
    return client


@pytest.fixture
def openai_client() -> FakeOpenAIClient:
    client = FakeOpenAIClient()
    client.create.response = openai_completion()
    client.embeddings.create.response = {
        "data": [{"index": 0, "embedding": [0.1, 0.2, 0.3]}],
        "model": "text-embedding-3-small",
    }
    return client


@pytest.fixture
def anthropic_provider(anthropic_record, anthropic_client) -> AnthropicProvider:
    return AnthropicProvider(anthropic_record, client=anthropic_client)


@pytest.fixture
def openai_provider(openai_record, openai_client) -> OpenAIProvider:
    return OpenAIProvider(openai_record, client=openai_client)


@pytest.fixture
def claude_model() -> ChatModel:
    return ChatModel(
        id="claude-sonnet",
        provider_type=ProviderType.ANTHROPIC,
        provider_id="anthropic",
        model="claude-sonnet-4-5",
    )


@pytest.fixture
def claude_thinking_model() -> ChatModel:
    return ChatModel.model_validate(
        {
            "id": "claude-sonnet-thinking",
            "providerType": "anthropic",
            "providerId": "anthropic",
            "model": "claude-sonnet-4-5",
            "thinking": {"budget_tokens": 4096},
        }
    )


@pytest.fixture
def gpt_model() -> ChatModel:
    return ChatModel(
        id="gpt",
        provider_type=ProviderType.OPENAI,
        provider_id="openai",
        model="gpt-4.1",
    )


@pytest.fixture
def embedding_model() -> EmbeddingModel:
    return EmbeddingModel(
        id="openai/text-embedding-3-small",
        provider_type=ProviderType.OPENAI,
        provider_id="openai",
        model="text-embedding-3-small",
    )


def make_request(*messages: Dict[str, Any], **fields: Any) -> LLMRequestNonStreaming:
    """Build a one-shot canonical request from message dicts."""
    return LLMRequestNonStreaming(
        model=fields.pop("model", "vendor-model"), messages=list(messages), **fields
    )


def make_stream_request(*messages: Dict[str, Any], **fields: Any) -> LLMRequestStreaming:
    """Build a streaming canonical request from message dicts."""
    return LLMRequestStreaming(
        model=fields.pop("model", "vendor-model"), messages=list(messages), **fields
    )


# =============================================================================
# HTTP app
# =============================================================================


@pytest.fixture
def manager(
    anthropic_provider,
    openai_provider,
    claude_model,
    gpt_model,
    embedding_model,
) -> LLMManager:
    registry = ProviderRegistry()
    registry.register(anthropic_provider)
    registry.register(openai_provider)
    disabled = gpt_model.model_copy(update={"id": "gpt-disabled", "enable": False})
    return LLMManager(
        registry,
        chat_models=[claude_model, gpt_model, disabled],
        embedding_models=[embedding_model],
    )


@pytest.fixture
def client(manager, monkeypatch) -> Generator[TestClient, None, None]:
    """Test client whose app is wired to fake vendor transports."""
    from chatbridge import main

    monkeypatch.setattr(main, "llm_manager", manager)
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def simple_chat_request() -> dict:
    """Simple chat completion request."""
    return {
        "model": "claude-sonnet",
        "messages": [{"role": "user", "content": "Say 'test' and nothing else"}],
    }


@pytest.fixture
def multimodal_message() -> dict:
    """Multimodal message with text and image."""
    return {
        "role": "user",
        "content": [
            {"type": "text", "text": "Describe this image briefly"},
            {"type": "image_url", "image_url": {"url": PNG_DATA_URL}},
        ],
    }
