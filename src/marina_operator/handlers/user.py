"""
User handlers - Route User changes to the UserReconciler.

Same shape as the Terminal handlers: thin adapters over the dispatcher,
an optional delete handler, and event handlers that map a changed
ServiceAccount or RoleBinding back to the User named in its labels.
"""

from typing import Any

import kopf

from marina_operator.constants import (
    MARINA_GROUP,
    MARINA_VERSION,
    OPERATOR_LABEL_KEY,
    OPERATOR_LABEL_VALUE,
    RBAC_API_GROUP,
    USER_KIND,
    USER_LABEL_KEY,
    USER_PLURAL,
)
from marina_operator.observability.logging import OperatorLogger
from marina_operator.settings import settings

logger = OperatorLogger(__name__)

OWNED_LABELS = {
    OPERATOR_LABEL_KEY: OPERATOR_LABEL_VALUE,
    USER_LABEL_KEY: kopf.PRESENT,
}


def _watch_owned(**_: Any) -> bool:
    return settings.watch_owned_resources


@kopf.on.create(MARINA_GROUP, MARINA_VERSION, USER_PLURAL)
@kopf.on.update(MARINA_GROUP, MARINA_VERSION, USER_PLURAL)
@kopf.on.resume(MARINA_GROUP, MARINA_VERSION, USER_PLURAL)
async def reconcile_user(
    name: str, namespace: str, memo: kopf.Memo, **kwargs: Any
) -> None:
    """Converge a created, changed or resumed User."""
    logger.log_handler_invoked(
        "create/update/resume",
        "user",
        name,
        namespace,
        level=settings.handler_entry_log_level,
    )
    await memo.dispatcher.dispatch(USER_KIND, namespace, name)


@kopf.on.delete(MARINA_GROUP, MARINA_VERSION, USER_PLURAL, optional=True)
async def finalize_user(
    name: str, namespace: str, memo: kopf.Memo, **kwargs: Any
) -> None:
    """Tear down a User that carries a deletion timestamp."""
    logger.log_handler_invoked(
        "delete", "user", name, namespace, level=settings.handler_entry_log_level
    )
    await memo.dispatcher.dispatch(USER_KIND, namespace, name)


@kopf.on.event("", "v1", "serviceaccounts", labels=OWNED_LABELS, when=_watch_owned)
@kopf.on.event(
    RBAC_API_GROUP, "v1", "rolebindings", labels=OWNED_LABELS, when=_watch_owned
)
async def user_dependent_changed(
    event: dict[str, Any],
    labels: dict[str, str],
    namespace: str,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Reconcile the owning User when its ServiceAccount or a RoleBinding changes."""
    if event.get("type") is None:
        return

    user_name = labels[USER_LABEL_KEY]
    logger.log_handler_invoked(
        "owned-event",
        "user",
        user_name,
        namespace,
        level=settings.handler_entry_log_level,
        event_type=event["type"],
    )
    try:
        await memo.dispatcher.dispatch(USER_KIND, namespace, user_name)
    except (kopf.TemporaryError, kopf.PermanentError) as e:
        # Event handlers are not retried by kopf; the next change retries
        logger.warning(
            f"Reconciling User {namespace}/{user_name} after a "
            f"{event['type']} dependent event failed: {e}",
            resource_type="user",
            resource_name=user_name,
            namespace=namespace,
            event_type=event["type"],
        )
