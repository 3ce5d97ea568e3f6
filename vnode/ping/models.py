"""Ping result model for the node ping controller."""

from dataclasses import dataclass

__all__ = ["PingResult", "PingTimeoutError"]


class PingTimeoutError(TimeoutError):
    """The provider did not answer within the configured ping timeout."""


@dataclass(frozen=True)
class PingResult:
    """Immutable outcome of one ping attempt."""

    ping_time: float | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def timed_out(self) -> bool:
        return isinstance(self.error, PingTimeoutError)
