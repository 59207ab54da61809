import asyncio
import logging
from typing import Optional

log = logging.getLogger(__name__)


def backoff_delay(attempt: int, *, base_delay: float, max_delay: float) -> float:
    return min(base_delay * (2 ** (attempt - 1)), max_delay)


async def retry_async(
    fn,
    *,
    attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 5.0,
    label: str = "call",
    sleep=asyncio.sleep,
):
    # Every exception is retried; callers have no way to mark one as permanent
    last_exc: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except Exception as exc:
            last_exc = exc
            if attempt == attempts:
                break
            delay = backoff_delay(attempt, base_delay=base_delay, max_delay=max_delay)
            log.warning("%s failed (attempt %d/%d), retrying in %.1fs: %s", label, attempt, attempts, delay, exc)
            await sleep(delay)
    log.error("%s failed after %d attempts: %s", label, attempts, last_exc)
    raise last_exc  # type: ignore[misc]
