"""
Waiting utilities: bounded capability polling and coroutine timeouts.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

CapabilityCheck = Callable[[], Union[Optional[T], Awaitable[Optional[T]]]]


async def wait_for_capability(
    check: CapabilityCheck,
    interval_ms: int = 500,
    timeout_ms: int = 10000,
    description: str = "capability",
) -> Optional[T]:
    """
    Poll until a capability becomes available or give up.
    
    The check is called immediately, then every interval_ms until it
    returns something other than None or timeout_ms has elapsed.
    
    Args:
        check: Sync or async callable returning the capability or None
        interval_ms: Delay between checks
        timeout_ms: Give-up deadline
        description: Name used in log lines
        
    Returns:
        The capability, or None if it never showed up
        
    Example:
        >>> source = await wait_for_capability(lambda: registry.get("host"))
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000
    
    while True:
        value = check()
        if inspect.isawaitable(value):
            value = await value
        if value is not None:
            return value
        
        remaining = deadline - loop.time()
        if remaining <= 0:
            logger.warning(f"{description} not available after {timeout_ms} ms")
            return None
        
        logger.debug(f"Waiting for {description}...")
        await asyncio.sleep(min(interval_ms / 1000, remaining))


async def with_timeout(
    awaitable: Awaitable[T],
    timeout_seconds: float,
    error_message: str = "Operation timed out",
) -> T:
    """
    Await with a deadline, raising a TimeoutError that says what was late.
    
    A zero deadline times out without running the awaitable at all.
    
    Raises:
        asyncio.TimeoutError: With error_message once the deadline passes
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        raise asyncio.TimeoutError(error_message) from e
