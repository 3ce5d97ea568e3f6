"""NodePingController: periodic liveness pings against a NodeProvider.

1. If the provider is stuck and not answering, the latest result must say the
   ping timed out rather than hang the loop.
2. The ping an attempt starts is cancelled when its timeout expires or the
   loop stops, so a provider stuck on I/O gets unstuck.
3. Never more than one provider ping in flight at a time. An attempt that only
   joined a call stops waiting on timeout without cancelling it.
"""

import asyncio
import logging
import threading
import time

from vnode.contract import NodeProvider
from vnode.ping.models import PingResult, PingTimeoutError
from vnode.ping.singleflight import Group

logger = logging.getLogger(__name__)

_PING_KEY = "ping"


class NodePingController:
    """Runs the ping loop and caches the most recent PingResult."""

    def __init__(
        self,
        provider: NodeProvider,
        interval: float,
        timeout: float | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Node ping interval must be positive, got {interval!r}")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"Node ping timeout must be positive, got {timeout!r}")
        self._provider = provider
        self._interval = interval
        self._timeout = timeout
        self._first_ping_completed = asyncio.Event()
        self._group = Group()
        self._lock = threading.Lock()
        self._result = PingResult()
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def start(self) -> None:
        """Start run() as an asyncio task."""
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Cancel and await the ping loop task."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def run(self) -> None:
        """Ping once, mark the first result available, then ping every interval.

        Runs until the task is cancelled; an in-flight ping is cancelled with it.
        """
        try:
            try:
                await self._check()
            finally:
                self._first_ping_completed.set()

            while True:
                await asyncio.sleep(self._interval)
                await self._check()
        finally:
            self._group.cancel(_PING_KEY)

    async def get_result(self, timeout: float | None = None) -> PingResult:
        """Wait for the first ping to complete, then return the latest result.

        Raises TimeoutError if timeout elapses first. Never triggers a ping.
        """
        if not self._first_ping_completed.is_set():
            if timeout is None:
                await self._first_ping_completed.wait()
            else:
                await asyncio.wait_for(self._first_ping_completed.wait(), timeout)
        with self._lock:
            return self._result

    async def _ping(self) -> float:
        try:
            async with asyncio.timeout(self._timeout) as cm:
                await self._provider.ping()
        except TimeoutError:
            if cm.expired():
                raise PingTimeoutError(
                    f"node ping timed out after {self._timeout}s"
                ) from None
            raise
        return time.time()

    async def _check(self) -> None:
        fut = self._group.do_chan(_PING_KEY, self._ping)
        try:
            done, _ = await asyncio.wait({fut}, timeout=self._timeout)
        except asyncio.CancelledError as e:
            self._set_result(PingResult(error=e))
            logger.warning("Node ping interrupted by shutdown")
            raise

        if not done:
            result = PingResult(
                error=PingTimeoutError(f"node ping timed out after {self._timeout}s")
            )
            logger.warning("Failed to ping node: %s", result.error)
        else:
            r = fut.result()
            if r.err is not None:
                result = PingResult(error=r.err)
                logger.warning("Node ping returned error: %s", r.err)
            else:
                result = PingResult(ping_time=r.val)
        self._set_result(result)

    def _set_result(self, result: PingResult) -> None:
        with self._lock:
            self._result = result
