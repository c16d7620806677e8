"""De-duplication of concurrent generation work per host."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from urllib.parse import urlparse

T = TypeVar('T')


def host_key(url: str) -> str:
    """Return the hostname of a URL, or the raw URL when it has none."""
    try:
        return urlparse(url).hostname or url
    except ValueError:
        return url


class InFlightRegistry:
    """Shares one running task per key between concurrent callers.

    All access happens on one event loop, so no locking is needed. Entries are
    removed when their task finishes, whether it succeeded or raised.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._tasks: dict[str, asyncio.Future[Any]] = {}

    def __contains__(self, key: str) -> bool:
        """Return True while a task for the key is running."""
        return key in self._tasks

    def __len__(self) -> int:
        """Return the number of running tasks."""
        return len(self._tasks)

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """Join the running task for a key, or start one.

        Args:
            key: De-duplication key, usually a hostname
            factory: Creates the awaitable; only called when no task is running

        Returns:
            The task's result, shared by every caller that joined it.

        """
        existing = self._tasks.get(key)
        if existing is not None:
            return await existing

        task = asyncio.ensure_future(factory())
        self._tasks[key] = task
        try:
            return await task
        finally:
            if self._tasks.get(key) is task:
                del self._tasks[key]
