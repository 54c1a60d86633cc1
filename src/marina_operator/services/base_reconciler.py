"""
Base reconciler class providing common patterns for resource reconciliation.

This module defines the BaseReconciler class that implements the standard
pass shared by every primary kind: fetch the primary object, converge its
dependents, then write back the primary when its finalizers changed.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..errors import (
    AlreadyExistsError,
    KubernetesAPIError,
    NotFoundError,
    OperatorError,
    ReconciliationError,
    TemporaryError,
)
from ..models import MarinaResource, ReconcileRequest, ReconcileResult
from ..observability.logging import OperatorLogger
from ..store import ObjectStore
from ..utils.finalizers import add_finalizer, has_finalizer, remove_finalizer


class BaseReconciler(ABC):
    """
    Base class for all resource reconcilers.

    Provides common patterns for:
    - Fetching the primary object and treating NotFound as done
    - Idempotent create and not-found tolerant delete of dependents
    - Per-dependent finalizer bookkeeping
    - Structured logging of every pass with duration and correlation ID

    Subclasses set ``primary_kind`` and implement ``do_reconcile``.
    """

    primary_kind: str

    def __init__(self, store: ObjectStore):
        """
        Initialize base reconciler.

        Args:
            store: Object store used for every read and write
        """
        self.store = store
        self.logger = OperatorLogger(self.__class__.__name__)

    @property
    def resource_type(self) -> str:
        return self.primary_kind.lower()

    async def _call_store(self, func: Callable[..., Any], *args: Any) -> Any:
        # Store calls block; keep them off the event loop
        return await asyncio.to_thread(func, *args)

    async def reconcile(self, request: ReconcileRequest) -> ReconcileResult:
        """
        Main reconciliation entry point.

        Args:
            request: Namespace and name of the primary object

        Returns:
            Result of the pass

        Raises:
            OperatorError: The pass failed and should be retried (or not,
                according to the error's ``retryable`` flag)
        """
        start_time = time.time()
        self.logger.log_reconciliation_start(
            resource_type=self.resource_type,
            resource_name=request.name,
            namespace=request.namespace,
        )

        try:
            try:
                primary = await self._call_store(
                    self.store.get, self.primary_kind, request.namespace, request.name
                )
            except NotFoundError:
                self.logger.info(
                    f"{self.primary_kind} {request} not found, nothing to reconcile",
                    resource_type=self.resource_type,
                    resource_name=request.name,
                    namespace=request.namespace,
                )
                return ReconcileResult()

            finalizers_before = list(primary.metadata.finalizers)
            try:
                result = await self.do_reconcile(primary)
            except OperatorError:
                # Steps that completed before the failure keep their finalizers
                if primary.metadata.finalizers != finalizers_before:
                    await self._persist_after_failure(primary)
                raise

            if primary.metadata.finalizers != finalizers_before:
                await self.persist_primary(primary)

        except OperatorError as e:
            self.logger.log_reconciliation_error(
                resource_type=self.resource_type,
                resource_name=request.name,
                namespace=request.namespace,
                error=e,
                duration=time.time() - start_time,
            )
            raise

        except Exception as e:
            # Wrap unexpected errors as temporary to allow retry
            error = TemporaryError(f"Unexpected error during reconciliation: {e}")
            self.logger.log_reconciliation_error(
                resource_type=self.resource_type,
                resource_name=request.name,
                namespace=request.namespace,
                error=error,
                duration=time.time() - start_time,
            )
            raise error from e

        self.logger.log_reconciliation_success(
            resource_type=self.resource_type,
            resource_name=request.name,
            namespace=request.namespace,
            duration=time.time() - start_time,
        )
        return result or ReconcileResult()

    @abstractmethod
    async def do_reconcile(self, primary: Any) -> ReconcileResult | None:
        """
        Converge the dependents of ``primary``.

        Implementations may add or remove finalizers on ``primary`` in
        memory; the base class writes the object back afterwards.
        """
        raise NotImplementedError("Subclasses must implement do_reconcile method")

    async def persist_primary(self, primary: MarinaResource) -> None:
        """Write the primary object back so its finalizer changes stick."""
        try:
            await self._call_store(self.store.update, primary)
        except NotFoundError:
            # Erased by the API server after its last finalizer went away
            # in a concurrent pass
            self.logger.debug(
                f"{primary.kind} {primary.namespace}/{primary.name} "
                "disappeared before it could be updated",
                resource_type=self.resource_type,
                resource_name=primary.name,
                namespace=primary.namespace,
            )
            return
        self.logger.debug(
            f"Updated finalizers of {primary.kind} {primary.namespace}/{primary.name}",
            resource_type=self.resource_type,
            resource_name=primary.name,
            namespace=primary.namespace,
            operation="update_primary",
        )

    async def _persist_after_failure(self, primary: MarinaResource) -> None:
        try:
            await self.persist_primary(primary)
        except OperatorError as e:
            self.logger.warning(
                f"Could not save finalizers of {primary.kind} "
                f"{primary.namespace}/{primary.name} after a failed pass: {e}",
                resource_type=self.resource_type,
                resource_name=primary.name,
                namespace=primary.namespace,
                error_type=type(e).__name__,
            )

    async def get_or_none(self, kind: str, namespace: str, name: str) -> Any | None:
        """Read an object, returning None if it does not exist."""
        try:
            return await self._call_store(self.store.get, kind, namespace, name)
        except NotFoundError:
            return None
        except KubernetesAPIError as e:
            raise ReconciliationError(
                f"could not fetch {kind} {namespace}/{name}: {e.args[0]}",
                retryable=e.retryable,
                cause=e,
            ) from e

    async def ensure_created(self, obj: Any) -> bool:
        """
        Create ``obj``; an existing object with the same name counts as success.

        Returns:
            True if the object was created by this call
        """
        kind, namespace, name = obj.kind, obj.metadata.namespace, obj.metadata.name
        try:
            await self._call_store(self.store.create, obj)
        except AlreadyExistsError:
            self.logger.debug(
                f"{kind} {namespace}/{name} already exists",
                derived_kind=kind,
                derived_name=name,
                namespace=namespace,
            )
            return False
        except KubernetesAPIError as e:
            raise ReconciliationError(
                f"could not create {kind} {namespace}/{name}: {e.args[0]}",
                retryable=e.retryable,
                cause=e,
            ) from e

        self.logger.info(
            f"Created {kind} {namespace}/{name}",
            derived_kind=kind,
            derived_name=name,
            namespace=namespace,
            operation="create",
        )
        return True

    async def ensure_deleted(self, obj: Any) -> bool:
        """
        Delete ``obj``; an object that is already gone counts as success.

        Returns:
            True if the object was deleted by this call
        """
        kind, namespace, name = obj.kind, obj.metadata.namespace, obj.metadata.name
        try:
            await self._call_store(self.store.delete, obj)
        except NotFoundError:
            self.logger.debug(
                f"{kind} {namespace}/{name} already deleted",
                derived_kind=kind,
                derived_name=name,
                namespace=namespace,
            )
            return False
        except KubernetesAPIError as e:
            raise ReconciliationError(
                f"could not delete {kind} {namespace}/{name}: {e.args[0]}",
                retryable=e.retryable,
                cause=e,
            ) from e

        self.logger.info(
            f"Deleted {kind} {namespace}/{name}",
            derived_kind=kind,
            derived_name=name,
            namespace=namespace,
            operation="delete",
        )
        return True

    async def provision_dependent(
        self, primary: MarinaResource, obj: Any, finalizer: str
    ) -> None:
        """Guard ``obj`` with ``finalizer`` and make sure it exists."""
        added = add_finalizer(primary, finalizer)
        try:
            await self.ensure_created(obj)
        except OperatorError:
            # Nothing was created, so nothing needs guarding
            if added:
                remove_finalizer(primary, finalizer)
            raise

    async def finalize_dependent(
        self, primary: MarinaResource, obj: Any, finalizer: str
    ) -> None:
        """Delete ``obj`` and release ``finalizer`` if it is still held."""
        if not has_finalizer(primary, finalizer):
            return
        await self.ensure_deleted(obj)
        remove_finalizer(primary, finalizer)
        self.logger.info(
            f"Removed finalizer {finalizer} from {primary.kind} "
            f"{primary.namespace}/{primary.name}",
            finalizer=finalizer,
            resource_name=primary.name,
            namespace=primary.namespace,
        )
