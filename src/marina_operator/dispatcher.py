"""
Dispatcher between kopf handlers and the reconcilers.

Reconcilers are registered per primary kind at start-up. Every change
notification, whether for a primary object or for one of its dependents,
becomes a call to ``dispatch(kind, namespace, name)``. Passes for the same
object never overlap; passes for different objects run concurrently.
Failures are handed back to kopf as TemporaryError/PermanentError so that
kopf owns retry and backoff.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Protocol

import kopf

from marina_operator.constants import DEFAULT_RETRY_DELAY
from marina_operator.errors import OperatorError
from marina_operator.models import ReconcileRequest, ReconcileResult

logger = logging.getLogger(__name__)


class Reconciler(Protocol):
    """Anything that can converge one primary object."""

    async def reconcile(self, request: ReconcileRequest) -> ReconcileResult: ...


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class Dispatcher:
    """Routes reconcile requests to the reconciler registered for their kind."""

    def __init__(self, retry_delay: int = DEFAULT_RETRY_DELAY):
        self.retry_delay = retry_delay
        self._reconcilers: dict[str, Reconciler] = {}
        self._locks: dict[tuple[str, str, str], _KeyLock] = {}

    def register(self, kind: str, reconciler: Reconciler) -> None:
        if kind in self._reconcilers:
            raise ValueError(f"a reconciler for {kind} is already registered")
        self._reconcilers[kind] = reconciler

    def reconciler_for(self, kind: str) -> Reconciler:
        try:
            return self._reconcilers[kind]
        except KeyError:
            raise kopf.PermanentError(f"no reconciler registered for {kind}") from None

    @property
    def in_flight(self) -> int:
        """Number of object identities with a pass running or queued."""
        return len(self._locks)

    @contextlib.asynccontextmanager
    async def _serialized(self, key: tuple[str, str, str]) -> AsyncIterator[None]:
        entry = self._locks.setdefault(key, _KeyLock())
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[key]

    async def dispatch(self, kind: str, namespace: str, name: str) -> ReconcileResult:
        """
        Run one reconciliation pass for ``kind`` ``namespace/name``.

        Raises:
            kopf.TemporaryError: The pass failed and should be retried, or
                the reconciler asked to be requeued
            kopf.PermanentError: The pass failed and retrying cannot help
        """
        reconciler = self.reconciler_for(kind)
        request = ReconcileRequest(namespace=namespace, name=name)

        async with self._serialized((kind, namespace, name)):
            try:
                result = await reconciler.reconcile(request)
            except OperatorError as e:
                raise e.as_kopf_error(delay=self.retry_delay) from e

        if result.requeue or result.requeue_after:
            logger.debug(f"Requeue requested for {kind} {request}")
            raise kopf.TemporaryError(
                f"{kind} {request} requested another pass",
                delay=result.requeue_after or self.retry_delay,
            )
        return result
