#!/usr/bin/env python3
"""
Marina Operator - Main entry point for the Kopf-based Marina operator.

This operator turns two custom resources into cluster objects:
- Terminal: a single-replica shell Deployment plus an SSH Service
- User: a ServiceAccount plus one RoleBinding per listed Role

Usage:
    python -m marina_operator.operator
    # Or with kopf directly:
    kopf run -m marina_operator.operator --all-namespaces

Environment Variables:
    MARINA_OPERATOR_NAMESPACES: Comma-separated list of namespaces to watch
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
    RETRY_DELAY_SECONDS: Delay before a failed pass is retried
"""

import logging
import random
import sys

import kopf
from kubernetes import client

from marina_operator.constants import TERMINAL_KIND, USER_KIND
from marina_operator.dispatcher import Dispatcher

# Import all handler modules to register them with kopf
# This is the standard pattern - importing modules registers their decorators
from marina_operator.handlers import terminal, user  # noqa: F401
from marina_operator.observability.logging import setup_structured_logging
from marina_operator.services import TerminalReconciler, UserReconciler
from marina_operator.settings import settings as operator_settings
from marina_operator.store import KubernetesObjectStore, default_scheme
from marina_operator.utils.kubernetes import get_kubernetes_client


def configure_logging() -> None:
    """Configure structured logging for the operator based on operator_settings."""
    setup_structured_logging(
        log_level=operator_settings.log_level.upper(),
        enable_json_formatting=operator_settings.json_logs,
        correlation_id_enabled=operator_settings.correlation_ids,
    )


def get_watched_namespaces() -> list[str] | None:
    """
    Get the list of namespaces to watch from operator_settings.

    Returns:
        List of namespace names, or None to watch all namespaces
    """
    return operator_settings.watched_namespaces


def build_dispatcher(api_client: client.ApiClient, retry_delay: int) -> Dispatcher:
    """
    Wire both reconcilers to a store backed by the given API client.

    Args:
        api_client: Configured Kubernetes API client
        retry_delay: Seconds kopf waits before retrying a failed pass

    Returns:
        Dispatcher with the Terminal and User reconcilers registered
    """
    store = KubernetesObjectStore(api_client, default_scheme())

    dispatcher = Dispatcher(retry_delay=retry_delay)
    dispatcher.register(TERMINAL_KIND, TerminalReconciler(store))
    dispatcher.register(USER_KIND, UserReconciler(store))
    return dispatcher


@kopf.on.startup()
async def startup_handler(
    settings: kopf.OperatorSettings, memo: kopf.Memo, **_
) -> None:
    """
    Operator startup configuration.

    This handler runs once when the operator starts up and configures
    kopf itself (peering, workers, reconnect backoff) before building the
    dispatcher every handler routes through.
    """
    logging.info("Starting Marina Operator...")
    settings.watching.reconnect_backoff = 1.0

    # Each pod gets a unique priority to enable leader election
    settings.peering.name = operator_settings.peering_name
    settings.peering.priority = random.randint(0, 32767)
    logging.info(
        f"Peering priority set to {settings.peering.priority} for leader election"
    )

    settings.execution.max_workers = operator_settings.max_workers

    watched_namespaces = get_watched_namespaces()
    if watched_namespaces:
        logging.info(f"Watching namespaces: {', '.join(watched_namespaces)}")
    else:
        logging.info("Watching all namespaces (cluster-wide mode)")

    memo.dispatcher = build_dispatcher(
        get_kubernetes_client(), operator_settings.retry_delay_seconds
    )
    logging.info(
        f"Reconcilers registered for {TERMINAL_KIND} and {USER_KIND} "
        f"(retry delay {operator_settings.retry_delay_seconds}s)"
    )


@kopf.on.cleanup()
async def cleanup_handler(memo: kopf.Memo, **_) -> None:
    """Log shutdown and any passes that were still running."""
    dispatcher = memo.get("dispatcher")
    if dispatcher is not None and dispatcher.in_flight:
        logging.warning(
            f"Shutting down with {dispatcher.in_flight} reconciliation(s) in flight"
        )
    logging.info("Shutting down Marina Operator...")


def main() -> None:
    """
    Main entry point for the operator.

    This function:
    1. Configures logging
    2. Determines namespace scope
    3. Runs the kopf operator with appropriate settings
    """
    configure_logging()

    watched_namespaces = get_watched_namespaces()

    try:
        # Other settings (peering, workers) are configured in the startup handler
        if watched_namespaces:
            kopf.run(namespaces=watched_namespaces)
        else:
            kopf.run(clusterwide=True)
    except KeyboardInterrupt:
        logging.info("Received shutdown signal")
        sys.exit(0)
    except Exception as e:
        logging.error(f"Operator failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
