"""
Object store protocol consumed by the reconcilers.

The store is the authoritative cluster state. Every call is synchronous and
blocking; reconcilers run them off the event loop. Objects are addressed by
(kind, namespace, name) and are either kubernetes client models (native
kinds) or Marina pydantic models (custom kinds). Both expose ``kind`` and
``metadata.name``/``metadata.namespace`` attributes.
"""

from typing import Any, Protocol


class ObjectStore(Protocol):
    """Typed CRUD surface over the cluster.

    Raises:
        NotFoundError: get/delete of an object that does not exist
        AlreadyExistsError: create of an object whose name is taken
        ConflictError: update based on a stale resourceVersion
        KubernetesAPIError: any other failure
    """

    def get(self, kind: str, namespace: str, name: str) -> Any: ...

    def create(self, obj: Any) -> Any: ...

    def update(self, obj: Any) -> Any: ...

    def delete(self, obj: Any) -> None: ...
