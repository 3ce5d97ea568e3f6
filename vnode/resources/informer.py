"""Informers: watched per-kind caches over an ObjectStore, and their listers."""

import asyncio
import logging
from typing import Any, Callable

from vnode.resources.store import ObjectStore, WatchEvent, object_key

logger = logging.getLogger(__name__)

__all__ = [
    "Informer",
    "Lister",
    "NamespaceLister",
    "NotFoundError",
    "wait_for_cache_sync",
]

_WATCH_POLL_INTERVAL = 0.1
_SYNCED_POLL_PERIOD = 0.1


class NotFoundError(LookupError):
    """Requested object is not in the cache."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"{kind} {key!r} not found")
        self.kind = kind
        self.key = key


def _matches(obj: Any, selector: dict[str, str] | None) -> bool:
    if not selector:
        return True
    labels = (obj.metadata.labels if obj.metadata else None) or {}
    return all(labels.get(k) == v for k, v in selector.items())


class Lister:
    """Read-only view of an informer cache. Returned objects must not be mutated."""

    def __init__(self, kind: str, cache: dict[str, Any]) -> None:
        self._kind = kind
        self._cache = cache

    def list(self, selector: dict[str, str] | None = None) -> list[Any]:
        """All cached objects whose labels match selector (equality only)."""
        return [o for o in self._cache.values() if _matches(o, selector)]

    def namespace(self, namespace: str) -> "NamespaceLister":
        return NamespaceLister(self._kind, self._cache, namespace)


class NamespaceLister:
    """Lister scoped to a single namespace."""

    def __init__(self, kind: str, cache: dict[str, Any], namespace: str) -> None:
        self._kind = kind
        self._cache = cache
        self._namespace = namespace

    def get(self, name: str) -> Any:
        key = f"{self._namespace}/{name}"
        try:
            return self._cache[key]
        except KeyError:
            raise NotFoundError(self._kind, key) from None

    def list(self, selector: dict[str, str] | None = None) -> list[Any]:
        return [
            o
            for o in self._cache.values()
            if o.metadata.namespace == self._namespace and _matches(o, selector)
        ]


class Informer:
    """Lists one kind from the store, then keeps the cache current from its watch."""

    def __init__(self, store: ObjectStore, kind: str) -> None:
        self._store = store
        self._kind = kind
        self._cache: dict[str, Any] = {}
        self._synced = False

    @property
    def kind(self) -> str:
        return self._kind

    def has_synced(self) -> bool:
        return self._synced

    def lister(self) -> Lister:
        return Lister(self._kind, self._cache)

    async def run(self, stop: asyncio.Event | None = None) -> None:
        """Populate the cache and follow the watch until stop is set or cancelled."""
        queue = self._store.watch(self._kind)
        try:
            for obj in self._store.list(self._kind):
                self._cache[object_key(obj)] = obj
            self._synced = True
            logger.debug("informer %s synced with %d objects", self._kind, len(self._cache))
            while stop is None or not stop.is_set():
                try:
                    event = await asyncio.wait_for(
                        queue.get(), timeout=_WATCH_POLL_INTERVAL
                    )
                except asyncio.TimeoutError:
                    continue
                self._apply(event)
        finally:
            self._store.stop_watch(self._kind, queue)

    def _apply(self, event: WatchEvent) -> None:
        key = object_key(event.object)
        if event.type == "DELETED":
            self._cache.pop(key, None)
        else:
            self._cache[key] = event.object


async def wait_for_cache_sync(
    stop: asyncio.Event | None, *has_synced: Callable[[], bool]
) -> bool:
    """Poll until every has_synced() is True. False if stop is set first."""
    while True:
        if all(fn() for fn in has_synced):
            return True
        if stop is not None and stop.is_set():
            logger.warning("stop requested before caches synced")
            return False
        await asyncio.sleep(_SYNCED_POLL_PERIOD)
