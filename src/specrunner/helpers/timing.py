"""Delay and deadline primitives for asynchronous tests."""
import asyncio
import logging
from typing import Any, Generator

from specrunner.core.domain import TimeLimitExceeded

logger = logging.getLogger("specrunner.helpers.timing")


async def time_passes(seconds: float) -> None:
    """Suspend the current task for the given number of seconds.

    Args:
        seconds: Delay before returning.
    """
    await asyncio.sleep(seconds)


class TimeLimit:
    """A deadline that fails after a duration unless cancelled first.

    Awaiting the limit raises TimeLimitExceeded once the duration elapses.
    Calling cancel() before then guarantees the failure never fires; calling
    it afterwards has no effect. A cancelled limit never resolves, so only
    await it in a race against other work.

    Attributes:
        seconds: The configured duration.
        future: Future that receives the TimeLimitExceeded failure.
    """

    def __init__(self, seconds: float) -> None:
        """Start the deadline on the running event loop.

        Args:
            seconds: Duration after which the limit fails.

        Raises:
            RuntimeError: If called outside a running event loop.
        """
        loop = asyncio.get_running_loop()
        self.seconds = seconds
        self.future: asyncio.Future[None] = loop.create_future()
        self._handle = loop.call_later(seconds, self._expire)
        self._cancelled = False

    def _expire(self) -> None:
        if not self.future.done():
            logger.debug(f"Time limit of {self.seconds}s exceeded")
            self.future.set_exception(TimeLimitExceeded(f"Time limit of {self.seconds}s exceeded"))

    @property
    def expired(self) -> bool:
        return self.future.done()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Stop the deadline if it has not already elapsed."""
        if self.expired:
            return
        self._handle.cancel()
        self._cancelled = True

    def __await__(self) -> Generator[Any, None, None]:
        return self.future.__await__()


def time_limit(seconds: float) -> TimeLimit:
    """Create a cancellable deadline on the running event loop.

    Args:
        seconds: Duration after which awaiting the limit fails.

    Returns:
        A TimeLimit that is already counting down.
    """
    return TimeLimit(seconds)
