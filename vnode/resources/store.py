"""In-memory object store with list + watch, standing in for the cluster API.

Holds kubernetes client models for the kinds a virtual node reads. Informers
list it once and then follow its watch stream.
"""

import asyncio
import copy
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Literal

from kubernetes import client

logger = logging.getLogger(__name__)

__all__ = ["KINDS", "ObjectStore", "WatchEvent", "kind_of", "object_key"]

KINDS: dict[str, type] = {
    "pods": client.V1Pod,
    "configmaps": client.V1ConfigMap,
    "secrets": client.V1Secret,
    "services": client.V1Service,
}


@dataclass(frozen=True)
class WatchEvent:
    """One change delivered to watchers of a kind."""

    type: Literal["ADDED", "MODIFIED", "DELETED"]
    object: Any


def kind_of(obj: Any) -> str:
    """Return the store kind for obj. Raises TypeError for unsupported objects."""
    for kind, cls in KINDS.items():
        if isinstance(obj, cls):
            return kind
    raise TypeError(f"Unsupported object type: {type(obj).__name__}")


def object_key(obj: Any) -> str:
    """namespace/name, or name for objects without a namespace."""
    meta = obj.metadata
    if meta is None or not meta.name:
        raise ValueError(f"{type(obj).__name__} has no metadata.name")
    if meta.namespace:
        return f"{meta.namespace}/{meta.name}"
    return meta.name


class ObjectStore:
    """Per-kind object map. Mutations are broadcast to every open watch."""

    def __init__(self, *objects: Any) -> None:
        self._objects: dict[str, dict[str, Any]] = {kind: {} for kind in KINDS}
        self._watchers: dict[str, list[asyncio.Queue[WatchEvent]]] = defaultdict(list)
        for obj in objects:
            self._objects[kind_of(obj)][object_key(obj)] = copy.deepcopy(obj)

    def list(self, kind: str) -> list[Any]:
        """Copies of every stored object of kind."""
        return [copy.deepcopy(o) for o in self._bucket(kind).values()]

    def watch(self, kind: str) -> asyncio.Queue[WatchEvent]:
        """Open a watch on kind. Events after this call are put on the queue."""
        self._bucket(kind)
        queue: asyncio.Queue[WatchEvent] = asyncio.Queue()
        self._watchers[kind].append(queue)
        return queue

    def stop_watch(self, kind: str, queue: asyncio.Queue[WatchEvent]) -> None:
        try:
            self._watchers[kind].remove(queue)
        except ValueError:
            pass

    def create(self, obj: Any) -> None:
        kind, key = kind_of(obj), object_key(obj)
        if key in self._objects[kind]:
            raise ValueError(f"{kind} {key!r} already exists")
        self._objects[kind][key] = copy.deepcopy(obj)
        self._notify(kind, WatchEvent("ADDED", obj))

    def update(self, obj: Any) -> None:
        kind, key = kind_of(obj), object_key(obj)
        if key not in self._objects[kind]:
            raise KeyError(f"{kind} {key!r} not found")
        self._objects[kind][key] = copy.deepcopy(obj)
        self._notify(kind, WatchEvent("MODIFIED", obj))

    def delete(self, kind: str, key: str) -> None:
        obj = self._bucket(kind).pop(key, None)
        if obj is None:
            raise KeyError(f"{kind} {key!r} not found")
        self._notify(kind, WatchEvent("DELETED", obj))

    def _bucket(self, kind: str) -> dict[str, Any]:
        try:
            return self._objects[kind]
        except KeyError:
            raise ValueError(f"Unknown kind {kind!r}") from None

    def _notify(self, kind: str, event: WatchEvent) -> None:
        watchers = self._watchers.get(kind, [])
        logger.debug("store: %s %s -> %d watchers", event.type, kind, len(watchers))
        for queue in watchers:
            queue.put_nowait(WatchEvent(event.type, copy.deepcopy(event.object)))
