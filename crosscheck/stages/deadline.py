"""
Deadline wrapper: races one provider call against a fixed duration.
"""

import asyncio
from typing import Awaitable

from crosscheck.models.schemas import ProviderCall, ProviderOutput, ProviderStatus


def timeout_output(call: ProviderCall, duration_ms: int) -> ProviderOutput:
    """The synthetic failure recorded when a call exceeds its deadline."""
    return ProviderOutput(
        provider=call.provider,
        model=call.model,
        status=ProviderStatus.TIMEOUT,
        elapsed_ms=duration_ms,
        error=f"timeout after {duration_ms}ms"
    )


async def with_deadline(
    call: ProviderCall,
    operation: Awaitable[ProviderOutput],
    duration_ms: int
) -> ProviderOutput:
    """
    Await `operation` for at most `duration_ms`.

    On expiry the wait is abandoned, the pending operation is cancelled and
    its eventual result discarded, and a timeout output tagged with `call`
    is returned instead. `asyncio.wait_for` arms a single timer and releases
    it on either path.

    Args:
        call: Identity used to tag the timeout output
        operation: The provider invocation
        duration_ms: Deadline in milliseconds

    Returns:
        The operation's own output, or a timeout output
    """
    try:
        return await asyncio.wait_for(operation, timeout=duration_ms / 1000)
    except asyncio.TimeoutError:
        return timeout_output(call, duration_ms)
