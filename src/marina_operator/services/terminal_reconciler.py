"""
Terminal reconciliation service.

A Terminal owns one Deployment and one Service, both named
``marina-terminal-<terminal>``. Each is guarded by its own finalizer so a
teardown interrupted between the two deletions resumes where it stopped.
"""

from ..constants import (
    TERMINAL_DEPLOYMENT_FINALIZER,
    TERMINAL_KIND,
    TERMINAL_SERVICE_FINALIZER,
)
from ..models import Terminal
from ..utils.kubernetes import deployment_for_terminal, service_for_terminal
from .base_reconciler import BaseReconciler


class TerminalReconciler(BaseReconciler):
    """
    Reconciler for Terminal resources.

    Dependents are converged in a fixed order, Deployment first and Service
    second, on both the create and the delete path.
    """

    primary_kind = TERMINAL_KIND

    async def do_reconcile(self, primary: Terminal) -> None:
        await self.reconcile_workload(primary)
        await self.reconcile_service(primary)

    async def reconcile_workload(self, terminal: Terminal) -> None:
        """Converge the Terminal's Deployment."""
        deployment = deployment_for_terminal(terminal)

        if terminal.is_being_deleted:
            await self.finalize_dependent(
                terminal, deployment, TERMINAL_DEPLOYMENT_FINALIZER
            )
            return

        await self.provision_dependent(
            terminal, deployment, TERMINAL_DEPLOYMENT_FINALIZER
        )

    async def reconcile_service(self, terminal: Terminal) -> None:
        """Converge the Terminal's SSH Service."""
        service = service_for_terminal(terminal)

        if terminal.is_being_deleted:
            await self.finalize_dependent(terminal, service, TERMINAL_SERVICE_FINALIZER)
            return

        await self.provision_dependent(terminal, service, TERMINAL_SERVICE_FINALIZER)
