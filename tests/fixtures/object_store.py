"""
In-memory object store for reconciler tests.

Behaves like the API server as far as the reconcilers can observe:
- uid and resourceVersion are assigned on create and bumped on every write
- update with a stale resourceVersion raises ConflictError
- delete of an object carrying finalizers only stamps a deletion timestamp;
  the object is erased once an update leaves it without finalizers

Every successful write is appended to ``mutations`` so tests can assert on
exactly what a pass changed.
"""

import itertools
from copy import deepcopy
from datetime import UTC, datetime
from typing import Any

from marina_operator.errors import AlreadyExistsError, ConflictError, NotFoundError

Key = tuple[str, str, str]


def _key(obj: Any) -> Key:
    return obj.kind, obj.metadata.namespace, obj.metadata.name


class InMemoryObjectStore:
    """ObjectStore implementation keeping objects in a dict."""

    def __init__(self):
        self.objects: dict[Key, Any] = {}
        self.mutations: list[tuple[str, str, str, str]] = []
        self.failures: dict[tuple[str, str, str], Exception] = {}
        self._versions = itertools.count(1)

    # Test helpers

    def seed(self, obj: Any) -> Any:
        """Store ``obj`` as if someone else created it. Not recorded."""
        stored = deepcopy(obj)
        self._stamp(stored, new=True)
        self.objects[_key(stored)] = stored
        return deepcopy(stored)

    def fail_on(self, verb: str, kind: str, name: str, error: Exception) -> None:
        """Make every ``verb`` of ``kind``/``name`` raise ``error``."""
        self.failures[(verb, kind, name)] = error

    def clear_failures(self) -> None:
        self.failures.clear()

    def exists(self, kind: str, namespace: str, name: str) -> bool:
        return (kind, namespace, name) in self.objects

    def peek(self, kind: str, namespace: str, name: str) -> Any:
        """Stored object without copying, for assertions."""
        return self.objects[(kind, namespace, name)]

    def writes(
        self, verb: str, kind: str | None = None
    ) -> list[tuple[str, str, str, str]]:
        return [
            m
            for m in self.mutations
            if m[0] == verb and (kind is None or m[1] == kind)
        ]

    # ObjectStore

    def get(self, kind: str, namespace: str, name: str) -> Any:
        self._maybe_fail("get", kind, name)
        try:
            return deepcopy(self.objects[(kind, namespace, name)])
        except KeyError:
            raise NotFoundError(kind, namespace, name) from None

    def create(self, obj: Any) -> Any:
        key = _key(obj)
        self._maybe_fail("create", key[0], key[2])
        if key in self.objects:
            raise AlreadyExistsError(*key)
        stored = deepcopy(obj)
        self._stamp(stored, new=True)
        self.objects[key] = stored
        self._record("create", key)
        return deepcopy(stored)

    def update(self, obj: Any) -> Any:
        key = _key(obj)
        self._maybe_fail("update", key[0], key[2])
        current = self.objects.get(key)
        if current is None:
            raise NotFoundError(*key)
        version = obj.metadata.resource_version
        if version is not None and version != current.metadata.resource_version:
            raise ConflictError(*key)

        stored = deepcopy(obj)
        # Clients cannot set or clear the deletion timestamp
        stored.metadata.deletion_timestamp = current.metadata.deletion_timestamp
        stored.metadata.uid = current.metadata.uid
        self._stamp(stored)
        self._record("update", key)

        if stored.metadata.deletion_timestamp is not None and not (
            stored.metadata.finalizers
        ):
            del self.objects[key]
            return deepcopy(stored)

        self.objects[key] = stored
        return deepcopy(stored)

    def delete(self, obj: Any) -> None:
        key = _key(obj)
        self._maybe_fail("delete", key[0], key[2])
        current = self.objects.get(key)
        if current is None:
            raise NotFoundError(*key)
        self._record("delete", key)

        if current.metadata.finalizers:
            if current.metadata.deletion_timestamp is None:
                current.metadata.deletion_timestamp = datetime.now(UTC)
                self._stamp(current)
            return
        del self.objects[key]

    # Internals

    def _maybe_fail(self, verb: str, kind: str, name: str) -> None:
        error = self.failures.get((verb, kind, name))
        if error is not None:
            raise error

    def _stamp(self, obj: Any, new: bool = False) -> None:
        if new and not obj.metadata.uid:
            obj.metadata.uid = f"uid-{obj.metadata.name}"
        obj.metadata.resource_version = str(next(self._versions))

    def _record(self, verb: str, key: Key) -> None:
        self.mutations.append((verb, *key))
