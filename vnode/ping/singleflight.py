"""Single-flight group: coalesce concurrent calls that share a key.

The first caller for a key starts the work as an asyncio task; callers that
arrive while it is in flight are attached to the same call and receive the
same Result. Futures handed out by do_chan() never raise: the outcome of the
call, including its exception, is carried in Result.err.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, NamedTuple

__all__ = ["Group", "Result"]


class Result(NamedTuple):
    """Outcome of a single-flight call as seen by one caller."""

    val: Any
    err: BaseException | None
    shared: bool


@dataclass
class _Call:
    waiters: list[asyncio.Future[Result]] = field(default_factory=list)
    dups: int = 0
    task: asyncio.Future[Any] | None = None


class Group:
    """Key -> in-flight call map. At most one underlying call per key."""

    def __init__(self) -> None:
        self._calls: dict[str, _Call] = {}

    def do_chan(
        self, key: str, fn: Callable[[], Awaitable[Any]]
    ) -> asyncio.Future[Result]:
        """Start fn() for key, or join the call already in flight.

        Returns a future resolved with the call's Result. Dropping or no longer
        awaiting the future does not cancel the underlying call.
        """
        fut: asyncio.Future[Result] = asyncio.get_running_loop().create_future()
        call = self._calls.get(key)
        if call is not None:
            call.dups += 1
            call.waiters.append(fut)
            return fut

        call = _Call(waiters=[fut])
        self._calls[key] = call
        call.task = asyncio.ensure_future(fn())
        call.task.add_done_callback(lambda t: self._finish(key, call, t))
        return fut

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> tuple[Any, bool]:
        """Run fn() single-flighted. Returns (value, shared) or raises its error."""
        result = await self.do_chan(key, fn)
        if result.err is not None:
            raise result.err
        return result.val, result.shared

    def forget(self, key: str) -> None:
        """Detach the in-flight call for key; the next caller starts a new one."""
        self._calls.pop(key, None)

    def cancel(self, key: str) -> None:
        """Cancel the in-flight call for key, if any. Its waiters get CancelledError."""
        call = self._calls.get(key)
        if call is not None and call.task is not None:
            call.task.cancel()

    def in_flight(self, key: str) -> bool:
        return key in self._calls

    def _finish(self, key: str, call: _Call, task: asyncio.Future[Any]) -> None:
        if self._calls.get(key) is call:
            del self._calls[key]
        if task.cancelled():
            result = Result(None, asyncio.CancelledError(), call.dups > 0)
        elif task.exception() is not None:
            result = Result(None, task.exception(), call.dups > 0)
        else:
            result = Result(task.result(), None, call.dups > 0)
        for waiter in call.waiters:
            if not waiter.done():
                waiter.set_result(result)
