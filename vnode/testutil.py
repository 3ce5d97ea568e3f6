"""Test helpers: resource managers and informers over a fixed set of objects."""

import asyncio
from typing import Any

from vnode.resources.informer import Informer, wait_for_cache_sync
from vnode.resources.manager import ResourceManager
from vnode.resources.store import ObjectStore


class FakeInformers:
    """Started informers for pods, config maps, secrets and services."""

    def __init__(self, store: ObjectStore) -> None:
        self.store = store
        self.pods = Informer(store, "pods")
        self.config_maps = Informer(store, "configmaps")
        self.secrets = Informer(store, "secrets")
        self.services = Informer(store, "services")
        self.tasks: list[asyncio.Task[None]] = []

    def all(self) -> tuple[Informer, Informer, Informer, Informer]:
        return self.pods, self.config_maps, self.secrets, self.services

    async def stop(self) -> None:
        """Cancel and await the informer tasks."""
        for task in self.tasks:
            task.cancel()
        await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks = []


async def make_fake_informers(
    *objects: Any, stop: asyncio.Event | None = None
) -> FakeInformers:
    """Start informers over a store holding objects and wait for them to sync.

    Objects can be any supported kubernetes model (V1Pod, V1ConfigMap,
    V1Secret, V1Service). Raises RuntimeError if stop is set before sync.
    """
    informers = FakeInformers(ObjectStore(*objects))
    informers.tasks = [asyncio.create_task(i.run(stop)) for i in informers.all()]
    if not await wait_for_cache_sync(stop, *(i.has_synced for i in informers.all())):
        await informers.stop()
        raise RuntimeError("failed to wait for caches to be synced")
    return informers


async def fake_resource_manager(
    *objects: Any, stop: asyncio.Event | None = None
) -> tuple[ResourceManager, FakeInformers]:
    """ResourceManager whose accessors return the given objects.

    The informers are returned too so callers can mutate the store and stop
    the background tasks.
    """
    informers = await make_fake_informers(*objects, stop=stop)
    manager = ResourceManager(
        informers.pods.lister(),
        informers.secrets.lister(),
        informers.config_maps.lister(),
        informers.services.lister(),
    )
    return manager, informers
