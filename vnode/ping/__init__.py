"""Node ping: periodic, single-flighted liveness checks with a cached result."""

from vnode.ping.config import PingConfig, build_ping_controller
from vnode.ping.controller import NodePingController
from vnode.ping.models import PingResult, PingTimeoutError
from vnode.ping.singleflight import Group, Result

__all__ = [
    "Group",
    "NodePingController",
    "PingConfig",
    "PingResult",
    "PingTimeoutError",
    "Result",
    "build_ping_controller",
]
