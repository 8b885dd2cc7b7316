from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Send = Callable[[str], Awaitable[Any]]

# Telegram rejects messages above 4096 characters
CHUNK_SIZE = 4000


def split_message(text: str, chunk_size: int = CHUNK_SIZE) -> list[str]:
    return [text[i : i + chunk_size] for i in range(0, len(text), chunk_size)] or [text]


async def send_with_retry(
    send: Send,
    text: str,
    *,
    attempts: int = 3,
    base_delay: float = 0.5,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> None:
    """Deliver ``text`` with bounded exponential backoff.

    The delay doubles after every failed attempt; the last failure is
    re-raised to the caller.
    """
    for chunk in split_message(text):
        for attempt in range(1, max(1, attempts) + 1):
            try:
                await send(chunk)
                break
            except Exception as exc:
                will_retry = attempt < attempts
                logger.warning(
                    "send_failed attempt=%s will_retry=%s err=%s: %s",
                    attempt,
                    will_retry,
                    type(exc).__name__,
                    exc,
                )
                if not will_retry:
                    raise
                await sleep(base_delay * (2 ** (attempt - 1)))
