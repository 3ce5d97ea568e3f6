"""ResourceManager: read-only accessors over informer-backed listers."""

from typing import Any

from vnode.resources.informer import Lister


class ResourceManager:
    """Pods, config maps, secrets and services as seen by the informer caches."""

    def __init__(
        self,
        pod_lister: Lister,
        secret_lister: Lister,
        config_map_lister: Lister,
        service_lister: Lister,
    ) -> None:
        for name, lister in (
            ("pod", pod_lister),
            ("secret", secret_lister),
            ("config map", config_map_lister),
            ("service", service_lister),
        ):
            if lister is None:
                raise ValueError(f"{name} lister is required")
        self._pod_lister = pod_lister
        self._secret_lister = secret_lister
        self._config_map_lister = config_map_lister
        self._service_lister = service_lister

    def get_pods(self) -> list[Any]:
        """Every pod in the cache."""
        return self._pod_lister.list()

    def get_config_map(self, name: str, namespace: str) -> Any:
        """Raises NotFoundError if absent."""
        return self._config_map_lister.namespace(namespace).get(name)

    def get_secret(self, name: str, namespace: str) -> Any:
        """Raises NotFoundError if absent."""
        return self._secret_lister.namespace(namespace).get(name)

    def list_services(self) -> list[Any]:
        return self._service_lister.list()
