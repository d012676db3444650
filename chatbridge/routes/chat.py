"""Chat completion routes."""

import json
import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from ..adapters.base import new_request_id
from ..cancellation import CancellationToken
from ..exceptions import LLMError
from ..models.llm import (
    LLMOptions,
    LLMRequest,
    LLMRequestNonStreaming,
    LLMRequestStreaming,
    LLMResponseNonStreaming,
    LLMResponseStreaming,
)
from ..services.llm_manager import LLMManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])

# Global service instance (will be set by main.py)
llm_manager: Optional[LLMManager] = None


def init_services(manager: LLMManager) -> None:
    """Initialize service instance."""
    global llm_manager
    llm_manager = manager


def get_manager() -> LLMManager:
    if llm_manager is None:
        raise HTTPException(status_code=503, detail="Services not initialized")
    return llm_manager


@router.post(
    "/chat/completions",
    response_model=LLMResponseNonStreaming,
    response_model_exclude_none=True,
)
async def chat_completions(request: LLMRequest):
    """
    OpenAI-compatible chat completions endpoint.

    ``model`` names a configured chat model; it is replaced by the vendor model
    name before the request reaches the adapter.
    """
    manager = get_manager()
    chat_model = manager.get_chat_model(request.model)
    request_cls = LLMRequestStreaming if request.stream else LLMRequestNonStreaming
    vendor_request = request_cls.model_validate(
        {**request.model_dump(), "model": chat_model.model}
    )
    request_id = new_request_id()

    logger.debug(
        f"Request {request_id}: stream={request.stream}, model={request.model}, "
        f"provider={chat_model.provider_id}"
    )

    if request.stream:
        cancel_token = CancellationToken()
        chunks = await manager.stream_response(
            chat_model, vendor_request, LLMOptions(cancel_token=cancel_token)
        )
        return StreamingResponse(
            generate_stream(chunks, cancel_token, request_id),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",
            },
        )

    return await manager.generate_response(chat_model, vendor_request)


async def generate_stream(
    chunks: AsyncIterator[LLMResponseStreaming],
    cancel_token: CancellationToken,
    request_id: str,
) -> AsyncIterator[str]:
    """Generate SSE streaming response."""
    completed = False
    try:
        async for chunk in chunks:
            yield f"data: {chunk.model_dump_json(exclude_none=True)}\n\n"
        completed = True
        yield "data: [DONE]\n\n"

    except LLMError as e:
        completed = True
        logger.error(f"Stream {request_id} error ({e.code}): {e.message}")
        yield f"data: {json.dumps(e.to_dict())}\n\n"
        yield "data: [DONE]\n\n"

    except Exception as e:
        completed = True
        logger.error(f"Stream {request_id} error: {e}")
        error = {"error": {"message": str(e), "type": "server_error"}}
        yield f"data: {json.dumps(error)}\n\n"
        yield "data: [DONE]\n\n"

    finally:
        if not completed:
            cancel_token.cancel("client disconnected")
        if hasattr(chunks, "aclose"):
            await chunks.aclose()
