"""Resource view: informer-backed, read-only caches of cluster objects."""

from vnode.resources.informer import (
    Informer,
    Lister,
    NamespaceLister,
    NotFoundError,
    wait_for_cache_sync,
)
from vnode.resources.manager import ResourceManager
from vnode.resources.store import KINDS, ObjectStore, WatchEvent

__all__ = [
    "KINDS",
    "Informer",
    "Lister",
    "NamespaceLister",
    "NotFoundError",
    "ObjectStore",
    "ResourceManager",
    "WatchEvent",
    "wait_for_cache_sync",
]
