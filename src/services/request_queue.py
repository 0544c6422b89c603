"""
Rate-limited request queue.

Outbound requests are executed one at a time in submission order. After each
request settles, successfully or not, the queue waits ``1 / rate_limit``
seconds before starting the next one.

    queue = RequestQueue(rate_limit=5)
    data = await queue.enqueue(lambda: fetch_json(session, url))
"""

import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Optional, Tuple

logger = logging.getLogger("RequestQueue")

Task = Callable[[], Awaitable[Any]]


class RequestQueue:
    def __init__(self, rate_limit: float = 5.0):
        if rate_limit <= 0:
            raise ValueError("rate_limit must be positive")
        self.delay = 1.0 / rate_limit
        self._pending: Deque[Tuple[Task, asyncio.Future]] = deque()
        self._processing = False
        self._worker: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def busy(self) -> bool:
        return self._processing

    async def enqueue(self, task: Task) -> Any:
        """Schedule ``task`` and wait for its result (or its exception)."""
        future = asyncio.get_running_loop().create_future()
        self._pending.append((task, future))

        if not self._processing:
            self._processing = True
            self._worker = asyncio.ensure_future(self._process())

        return await future

    async def _process(self):
        try:
            while self._pending:
                task, future = self._pending.popleft()
                try:
                    result = await task()
                except Exception as e:
                    logger.debug(f"Queued request failed: {e}")
                    if not future.done():
                        future.set_exception(e)
                else:
                    if not future.done():
                        future.set_result(result)

                await asyncio.sleep(self.delay)
        finally:
            self._processing = False
