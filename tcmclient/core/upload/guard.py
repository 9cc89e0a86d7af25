"""
Timeout guard for upload attempts.

Races the transport call against a timer. Whichever loses is cancelled and
awaited before the guard exits, so no timer or request outlives its attempt.
"""
import asyncio
from typing import Any, Awaitable, Optional

from ..exceptions import AbortedError


class TimeoutGuard:
    """
    Scoped deadline for a single awaitable.

    Example:
        >>> async with TimeoutGuard(30.0) as guard:
        ...     result = await guard.run(transport_call())

    When the timer wins, the transport task is cancelled, `fired` is set and
    run() raises AbortedError. A transport task cancelled by anyone else
    also raises AbortedError, with `fired` left False.
    """

    def __init__(self, timeout: float):
        """
        Initialize guard.

        Args:
            timeout: Deadline in seconds
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self.fired = False
        self._transport: Optional[asyncio.Future] = None
        self._timer: Optional[asyncio.Future] = None

    @property
    def active(self) -> bool:
        """True while the transport or the timer is still pending."""
        return any(
            task is not None and not task.done()
            for task in (self._transport, self._timer)
        )

    async def __aenter__(self) -> 'TimeoutGuard':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.release()
        return False

    async def run(self, awaitable: Awaitable[Any]) -> Any:
        """
        Await `awaitable` under the deadline.

        Returns:
            The awaitable's result

        Raises:
            AbortedError: Deadline expired or the transport was cancelled
            Exception: Whatever the awaitable raised
        """
        if self._transport is not None:
            raise RuntimeError("TimeoutGuard can only run once")

        self._transport = asyncio.ensure_future(awaitable)
        self._timer = asyncio.ensure_future(asyncio.sleep(self.timeout))

        try:
            await asyncio.wait(
                {self._transport, self._timer},
                return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            # Outer cancellation lands here too
            await self.release()

        if not self._transport.cancelled():
            return self._transport.result()

        if self.fired:
            raise AbortedError(f"Request aborted after {self.timeout:g}s deadline")
        raise AbortedError()

    async def release(self) -> None:
        """Cancel and await whatever is still pending. Safe to call twice."""
        if self._transport is not None and not self._transport.done():
            self.fired = self._timer is not None and self._timer.done() and not self._timer.cancelled()
            self._transport.cancel()

        pending = [
            task for task in (self._transport, self._timer)
            if task is not None
        ]
        for task in pending:
            if not task.done():
                task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
