"""
Build coalescing (Singleflight) for concurrent cache misses.

When several requests miss the same cache key at once, only the first
builds the content; the others wait and receive the same result.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .stores.memory import MemorySingleflightStore

logger = logging.getLogger(__name__)


@dataclass
class SingleflightResult:
    """Result of a singleflight operation."""

    value: bytes
    """The built content."""

    shared: bool
    """Whether this result came from another request's build."""


class Singleflight:
    """
    Singleflight - one build per cache key at a time.

    Example:
        sf = Singleflight()

        # Concurrent callers for "v1:/a.js,/b.js" share a single build
        result = await sf.do("v1:/a.js,/b.js", build)
        print(result.shared)
    """

    def __init__(self, store: Optional[MemorySingleflightStore] = None) -> None:
        self._store = store or MemorySingleflightStore()

    async def do(
        self,
        key: str,
        fn: Callable[[], Awaitable[bytes]],
    ) -> SingleflightResult:
        """
        Run fn for key unless a build for key is already in flight.

        Errors of the leading build are raised to every waiter.
        """
        existing = self._store.get(key)
        if existing is not None:
            logger.debug(f"Joining in-flight build for {key}")
            # shield: a cancelled waiter must not cancel the leader's future
            try:
                value = await asyncio.shield(existing)
            except asyncio.CancelledError:
                if not existing.cancelled():
                    raise
                # Leader was cancelled, build independently
                return SingleflightResult(value=await fn(), shared=False)
            return SingleflightResult(value=value, shared=True)

        loop = asyncio.get_running_loop()
        future: "asyncio.Future[bytes]" = loop.create_future()
        self._store.set(key, future)
        started_at = time.monotonic()

        try:
            value = await fn()
        except Exception as error:
            future.set_exception(error)
            # Mark retrieved so an unobserved failure is not reported by asyncio
            future.exception()
            raise
        except BaseException:
            future.cancel()
            raise
        else:
            future.set_result(value)
            logger.debug(
                f"Built {key} in {time.monotonic() - started_at:.3f}s"
            )
            return SingleflightResult(value=value, shared=False)
        finally:
            self._store.delete(key)

    def is_in_flight(self, key: str) -> bool:
        """Check if a build is currently in flight."""
        return self._store.has(key)

    def get_stats(self) -> dict:
        """Get statistics about in-flight builds."""
        return {"in_flight": self._store.size()}

    def close(self) -> None:
        """Forget all in-flight builds."""
        self._store.clear()
