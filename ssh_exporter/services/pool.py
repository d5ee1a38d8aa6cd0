"""Bounded worker pool for remote executions.

Every (script, host) execution must hold a slot while it talks to the
remote host, so at most ``max_size`` SSH connections are open at once no
matter how many hosts are configured. Executions beyond that wait in FIFO
order for a slot to free up.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class WorkerPool:
    """Admission control for concurrent remote executions."""

    def __init__(self, max_size: int = 100) -> None:
        """Initialize pool.

        Args:
            max_size: Maximum number of concurrent executions (must be > 0)

        Raises:
            ValueError: If max_size is not positive
        """
        if max_size <= 0:
            raise ValueError(f"max_size must be > 0, got {max_size}")

        self.max_size = max_size
        self._semaphore = asyncio.Semaphore(max_size)
        self._active = 0
        self._queued = 0
        self._completed = 0

        logger.info("WorkerPool initialized (max_size=%d)", max_size)

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one execution slot for the duration of the block."""
        self._queued += 1
        try:
            await self._semaphore.acquire()
        finally:
            self._queued -= 1

        self._active += 1
        if self._active == self.max_size:
            logger.debug("Pool at capacity (%d/%d)", self._active, self.max_size)
        try:
            yield
        finally:
            self._active -= 1
            self._completed += 1
            self._semaphore.release()

    @property
    def active(self) -> int:
        """Number of executions currently holding a slot."""
        return self._active

    @property
    def queued(self) -> int:
        """Number of executions waiting for a slot."""
        return self._queued

    @property
    def completed(self) -> int:
        """Number of executions that have released their slot."""
        return self._completed
