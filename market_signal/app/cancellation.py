"""Abort in-flight upstream work when the HTTP client goes away."""
import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import Request

from market_signal.app.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ClientDisconnected(Exception):
    """The caller hung up before the pipeline finished."""


async def run_until_disconnect(request: Request, work: Awaitable[T], poll_interval: float | None = None) -> T:
    """
    Await ``work`` while polling the connection; cancel it if the client disconnects.

    Cancelling the task unwinds the pending httpx / model calls inside it.
    """
    interval = settings.disconnect_poll_interval if poll_interval is None else poll_interval
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.warning("Client disconnected from %s; cancelling upstream calls", request.url.path)
                await _cancel_and_wait(task)
                raise ClientDisconnected(request.url.path)
    finally:
        if not task.done():
            await _cancel_and_wait(task)


async def _cancel_and_wait(task: "asyncio.Future") -> None:
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception as exc:  # noqa: BLE001
        logger.warning("Cancelled pipeline raised while unwinding: %s", exc)
