from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Type, Tuple

from docuextract.core.logging import get_logger

_logger = get_logger(__name__)


async def async_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    retries: int = 2,
    backoff: float = 0.2,
    max_backoff: float = 1.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> Any:
    """Await ``fn`` and retry on ``exceptions`` with exponential backoff.

    Backoff doubles each attempt up to max_backoff; the last failure propagates.
    """
    attempt = 0
    delay = backoff
    while True:
        try:
            return await fn(*args, **kwargs)
        except exceptions as e:
            if attempt >= retries:
                raise
            _logger.warning(
                "retrying_after_error",
                extra={"attempt": attempt + 1, "delay": delay, "error": str(e)[:200]},
            )
            await asyncio.sleep(delay)
            delay = min(delay * 2, max_backoff)
            attempt += 1
