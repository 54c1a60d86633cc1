"""
User reconciliation service.

A User owns a ServiceAccount named after it and one RoleBinding per entry
in ``spec.roles``, named ``<user>-<role>``. The Roles themselves are never
created by the operator; a missing Role fails the pass.

Role bindings are not diffed against the role list. Dropping a role from
``spec.roles`` leaves its binding in place, and deleting the User only
removes the bindings for roles still listed at that time.
"""

from ..constants import (
    ROLE_BINDING_KIND,
    ROLE_KIND,
    USER_KIND,
    USER_ROLE_BINDING_FINALIZER,
    USER_SERVICE_ACCOUNT_FINALIZER,
)
from ..errors import (
    KubernetesAPIError,
    NotFoundError,
    ReconciliationError,
    RoleNotFoundError,
)
from ..models import User
from ..utils.finalizers import add_finalizer, has_finalizer, remove_finalizer
from ..utils.kubernetes import role_binding_for_user, service_account_for_user
from .base_reconciler import BaseReconciler


class UserReconciler(BaseReconciler):
    """Reconciler for User resources."""

    primary_kind = USER_KIND

    async def do_reconcile(self, primary: User) -> None:
        await self.reconcile_identity(primary)
        await self.reconcile_role_bindings(primary)

    async def reconcile_identity(self, user: User) -> None:
        """Converge the User's ServiceAccount."""
        service_account = service_account_for_user(user)

        if user.is_being_deleted:
            await self.finalize_dependent(
                user, service_account, USER_SERVICE_ACCOUNT_FINALIZER
            )
            return

        await self.provision_dependent(
            user, service_account, USER_SERVICE_ACCOUNT_FINALIZER
        )

    async def reconcile_role_bindings(self, user: User) -> None:
        """
        Converge one RoleBinding per listed role.

        Bindings created for earlier roles stay in place when a later role
        is missing; the next pass picks up from there.
        """
        if user.is_being_deleted:
            if not has_finalizer(user, USER_ROLE_BINDING_FINALIZER):
                return
            for role in user.spec.roles:
                await self.ensure_deleted(role_binding_for_user(user, role))
            remove_finalizer(user, USER_ROLE_BINDING_FINALIZER)
            self.logger.info(
                f"Removed finalizer {USER_ROLE_BINDING_FINALIZER} from User "
                f"{user.namespace}/{user.name}",
                finalizer=USER_ROLE_BINDING_FINALIZER,
                resource_name=user.name,
                namespace=user.namespace,
            )
            return

        add_finalizer(user, USER_ROLE_BINDING_FINALIZER)

        for role in user.spec.roles:
            await self._require_role(user, role)

            binding = role_binding_for_user(user, role)
            existing = await self.get_or_none(
                ROLE_BINDING_KIND, user.namespace, binding.metadata.name
            )
            if existing is not None:
                # Existing bindings are left as they are
                continue
            await self.ensure_created(binding)

    async def _require_role(self, user: User, role: str) -> None:
        try:
            await self._call_store(self.store.get, ROLE_KIND, user.namespace, role)
        except NotFoundError as e:
            raise RoleNotFoundError(role=role, namespace=user.namespace, cause=e) from e
        except KubernetesAPIError as e:
            raise ReconciliationError(
                f"could not fetch role {user.namespace}/{role}: {e.args[0]}",
                retryable=e.retryable,
                cause=e,
            ) from e

        self.logger.debug(
            f"Found role {user.namespace}/{role}",
            role=role,
            resource_name=user.name,
            namespace=user.namespace,
        )
