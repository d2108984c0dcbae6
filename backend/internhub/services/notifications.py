"""
Best-effort notification contract.

A notification never affects the result of the operation that triggered it:
``notify`` awaits the send with a deadline, records the outcome through the
application logger and never raises.
"""

import asyncio
from typing import Awaitable, Optional

from internhub.core.config import settings
from internhub.core.logging_config import logger


async def notify(label: str, send: Awaitable[bool], timeout: Optional[float] = None) -> bool:
    """
    Await a notification send without letting it fail the caller.

    Args:
        label: Short name for logs, e.g. "internship_completion"
        send: Coroutine returned by an EmailService method
        timeout: Seconds to wait (defaults to EMAIL_SEND_TIMEOUT_SECONDS)

    Returns:
        True when the transport reported delivery, False otherwise
    """
    timeout = timeout or settings.EMAIL_SEND_TIMEOUT_SECONDS
    try:
        delivered = await asyncio.wait_for(send, timeout=timeout)
    except asyncio.TimeoutError:
        logger.log_notification(label, delivered=False, reason=f"timed out after {timeout}s")
        return False
    except Exception as e:
        logger.log_notification(label, delivered=False, reason=f"{type(e).__name__}: {e}")
        return False

    delivered = bool(delivered)
    logger.log_notification(label, delivered=delivered, reason=None if delivered else "transport reported failure")
    return delivered
