"""Cooperative cancellation for vendor calls."""

import asyncio
import inspect
import logging
from typing import Awaitable, Optional, TypeVar

from .exceptions import RequestCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Cancellation signal passed through to the vendor transport.

    One token may be shared by several calls; firing it aborts all of them.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation. Repeated calls keep the first reason."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelledError(self._reason or "Request was cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled}, reason={self._reason!r})"


async def run_cancellable(
    call: Awaitable[T], token: Optional[CancellationToken] = None
) -> T:
    """Await ``call`` unless ``token`` fires first.

    On cancellation the in-flight call is cancelled (closing its HTTP request)
    and ``RequestCancelledError`` is raised. If the awaiting task is cancelled
    instead, the call is cancelled too and ``CancelledError`` propagates.
    """
    if token is None:
        return await call

    if token.cancelled:
        if inspect.iscoroutine(call):
            call.close()
        token.raise_if_cancelled()

    call_task = asyncio.ensure_future(call)
    cancel_task = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({call_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        cancel_task.cancel()
        if not call_task.done():
            call_task.cancel()
        await asyncio.wait({call_task, cancel_task})

    if not call_task.cancelled():
        return call_task.result()

    logger.info(f"Vendor call cancelled: {token.reason or 'no reason given'}")
    raise RequestCancelledError(token.reason or "Request was cancelled")
