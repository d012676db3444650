"""Vendor stream to canonical chunk stream.

Each adapter supplies a pure fold ``(StreamState, event) -> (StreamState, chunk)``;
``drive_stream`` pulls vendor events, applies the fold, and appends the
usage-bearing terminal chunk once the vendor stream is exhausted.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, Optional, Tuple

from ..cancellation import CancellationToken
from ..models.common import TokenUsage
from ..models.llm import LLMResponseStreaming
from ..utils.debug_logger import log_vendor_event
from .base import normalize_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamState:
    """Accumulated state of one streaming call."""

    message_id: str = ""
    model_name: str = ""
    usage: TokenUsage = field(default_factory=TokenUsage)


StreamFold = Callable[
    [StreamState, Dict[str, Any]], Tuple[StreamState, Optional[LLMResponseStreaming]]
]

_CANCELLED = object()


def terminal_chunk(state: StreamState) -> LLMResponseStreaming:
    """Final chunk: no choices, cumulative usage."""
    return LLMResponseStreaming(
        id=state.message_id,
        model=state.model_name,
        choices=[],
        usage=state.usage.to_usage(),
    )


async def _anext(iterator: AsyncIterator[Any]) -> Any:
    return await iterator.__anext__()


async def _next_event(
    iterator: AsyncIterator[Any], cancel_token: Optional[CancellationToken]
) -> Any:
    """Next vendor event, or ``_CANCELLED`` if the token has fired.

    The pending read never outlives this call, including when the caller
    itself is cancelled.
    """
    if cancel_token is None:
        return await iterator.__anext__()

    next_task = asyncio.ensure_future(_anext(iterator))
    cancel_task = asyncio.ensure_future(cancel_token.wait())
    try:
        await asyncio.wait({next_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        cancel_task.cancel()
        if not next_task.done():
            next_task.cancel()
        await asyncio.wait({next_task, cancel_task})

    # An event that lands in the same tick as the token is dropped
    if cancel_token.cancelled:
        if not next_task.cancelled():
            next_task.exception()
        return _CANCELLED
    return next_task.result()


async def _close_stream(stream: Any) -> None:
    close = getattr(stream, "close", None) or getattr(stream, "aclose", None)
    if close is None:
        return
    result = close()
    if inspect.isawaitable(result):
        await result


async def drive_stream(
    stream: Any,
    fold: StreamFold,
    cancel_token: Optional[CancellationToken] = None,
    request_id: str = "",
) -> AsyncIterator[LLMResponseStreaming]:
    """Translate a vendor event stream into canonical chunks.

    A cancelled stream ends without the terminal chunk. The vendor stream is
    closed however iteration ends.
    """
    state = StreamState()
    iterator = stream.__aiter__()
    event_index = 0

    try:
        while True:
            if cancel_token is not None and cancel_token.cancelled:
                logger.info(f"[{request_id}] Stream cancelled: {cancel_token.reason or 'no reason given'}")
                return

            try:
                raw = await _next_event(iterator, cancel_token)
            except StopAsyncIteration:
                break

            if raw is _CANCELLED:
                logger.info(f"[{request_id}] Stream cancelled: {cancel_token.reason or 'no reason given'}")
                return

            event = normalize_payload(raw)
            log_vendor_event(request_id, event_index, event)
            event_index += 1

            state, chunk = fold(state, event)
            if chunk is not None:
                yield chunk

        logger.debug(
            f"[{request_id}] Stream complete: {event_index} events, "
            f"{state.usage.output_tokens} completion tokens"
        )
        yield terminal_chunk(state)
    finally:
        await _close_stream(stream)
