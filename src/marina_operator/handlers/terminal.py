"""
Terminal handlers - Route Terminal changes to the TerminalReconciler.

Every handler here is a thin adapter: it turns a kopf notification into a
``dispatch(Terminal, namespace, name)`` call and lets the reconciler read
the current object itself. The delete handler is optional so kopf adds no
finalizer of its own; the reconciler's per-dependent finalizers keep the
Terminal around until its Deployment and Service are gone.
"""

from typing import Any

import kopf

from marina_operator.constants import (
    MARINA_GROUP,
    MARINA_VERSION,
    OPERATOR_LABEL_KEY,
    OPERATOR_LABEL_VALUE,
    TERMINAL_KIND,
    TERMINAL_LABEL_KEY,
    TERMINAL_PLURAL,
)
from marina_operator.observability.logging import OperatorLogger
from marina_operator.settings import settings

logger = OperatorLogger(__name__)

OWNED_LABELS = {
    OPERATOR_LABEL_KEY: OPERATOR_LABEL_VALUE,
    TERMINAL_LABEL_KEY: kopf.PRESENT,
}


def _watch_owned(**_: Any) -> bool:
    return settings.watch_owned_resources


@kopf.on.create(MARINA_GROUP, MARINA_VERSION, TERMINAL_PLURAL)
@kopf.on.update(MARINA_GROUP, MARINA_VERSION, TERMINAL_PLURAL)
@kopf.on.resume(MARINA_GROUP, MARINA_VERSION, TERMINAL_PLURAL)
async def reconcile_terminal(
    name: str, namespace: str, memo: kopf.Memo, **kwargs: Any
) -> None:
    """Converge a created, changed or resumed Terminal."""
    logger.log_handler_invoked(
        "create/update/resume",
        "terminal",
        name,
        namespace,
        level=settings.handler_entry_log_level,
    )
    await memo.dispatcher.dispatch(TERMINAL_KIND, namespace, name)


@kopf.on.delete(MARINA_GROUP, MARINA_VERSION, TERMINAL_PLURAL, optional=True)
async def finalize_terminal(
    name: str, namespace: str, memo: kopf.Memo, **kwargs: Any
) -> None:
    """Tear down a Terminal that carries a deletion timestamp."""
    logger.log_handler_invoked(
        "delete", "terminal", name, namespace, level=settings.handler_entry_log_level
    )
    await memo.dispatcher.dispatch(TERMINAL_KIND, namespace, name)


@kopf.on.event("apps", "v1", "deployments", labels=OWNED_LABELS, when=_watch_owned)
@kopf.on.event("", "v1", "services", labels=OWNED_LABELS, when=_watch_owned)
async def terminal_dependent_changed(
    event: dict[str, Any],
    labels: dict[str, str],
    namespace: str,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Reconcile the owning Terminal when its Deployment or Service changes."""
    if event.get("type") is None:
        # Initial listing, the Terminal's own resume handler covers it
        return

    terminal_name = labels[TERMINAL_LABEL_KEY]
    logger.log_handler_invoked(
        "owned-event",
        "terminal",
        terminal_name,
        namespace,
        level=settings.handler_entry_log_level,
        event_type=event["type"],
    )
    try:
        await memo.dispatcher.dispatch(TERMINAL_KIND, namespace, terminal_name)
    except (kopf.TemporaryError, kopf.PermanentError) as e:
        # Event handlers are not retried by kopf; the next change retries
        logger.warning(
            f"Reconciling Terminal {namespace}/{terminal_name} after a "
            f"{event['type']} dependent event failed: {e}",
            resource_type="terminal",
            resource_name=terminal_name,
            namespace=namespace,
            event_type=event["type"],
        )
