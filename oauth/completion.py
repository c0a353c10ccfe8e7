"""Single-assignment completion for the pending login result"""

import asyncio
import logging
from typing import Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OneShot(Generic[T]):
    """A future that can be fulfilled exactly once

    The first call to resolve() or reject() decides the outcome; later calls
    are ignored and return False.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._future: asyncio.Future = (loop or asyncio.get_running_loop()).create_future()

    @property
    def done(self) -> bool:
        return self._future.done()

    def resolve(self, value: T) -> bool:
        """Fulfil with a value

        Returns:
            True if this call decided the outcome
        """
        if self._future.done():
            logger.debug("Ignoring resolve() on an already completed login")
            return False
        self._future.set_result(value)
        return True

    def reject(self, error: BaseException) -> bool:
        """Fulfil with an exception

        Returns:
            True if this call decided the outcome
        """
        if self._future.done():
            logger.debug(f"Ignoring reject({type(error).__name__}) on an already completed login")
            return False
        self._future.set_exception(error)
        return True

    async def wait(self) -> T:
        """Wait for the outcome; cancelling the waiter leaves the result intact"""
        return await asyncio.shield(self._future)
