"""Node provider protocol: the backend capability a virtual node exposes.

The ping controller detects nothing beyond ping(); everything else a node
backend does (pod lifecycle, status updates) lives outside this package.
"""

from typing import Protocol, runtime_checkable


class ProviderError(Exception):
    """Raised by a NodeProvider when the backend reports itself unhealthy."""


@runtime_checkable
class NodeProvider(Protocol):
    """Backend of a virtual node. Only the liveness contract is assumed."""

    async def ping(self) -> None:
        """Return normally if the backend is alive, raise otherwise.

        The call is cancelled when the ping timeout expires or the ping loop
        stops; it should let CancelledError propagate promptly.
        """
