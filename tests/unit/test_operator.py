"""Unit tests for operator start-up wiring."""

from unittest.mock import MagicMock, patch

import kopf
import pytest

from marina_operator import operator
from marina_operator.dispatcher import Dispatcher
from marina_operator.services import TerminalReconciler, UserReconciler


def test_build_dispatcher_registers_both_reconcilers():
    dispatcher = operator.build_dispatcher(MagicMock(), retry_delay=11)

    assert isinstance(dispatcher, Dispatcher)
    assert dispatcher.retry_delay == 11
    assert isinstance(dispatcher.reconciler_for("Terminal"), TerminalReconciler)
    assert isinstance(dispatcher.reconciler_for("User"), UserReconciler)


def test_reconcilers_share_one_store():
    dispatcher = operator.build_dispatcher(MagicMock(), retry_delay=30)

    assert (
        dispatcher.reconciler_for("Terminal").store
        is dispatcher.reconciler_for("User").store
    )


@pytest.mark.asyncio
async def test_startup_configures_kopf_and_memo():
    settings = kopf.OperatorSettings()
    memo = kopf.Memo()

    with patch.object(operator, "get_kubernetes_client", return_value=MagicMock()):
        await operator.startup_handler(settings=settings, memo=memo)

    assert settings.peering.name == operator.operator_settings.peering_name
    assert settings.execution.max_workers == operator.operator_settings.max_workers
    assert isinstance(memo.dispatcher, Dispatcher)


def test_main_runs_clusterwide_without_namespaces():
    with (
        patch.object(operator, "configure_logging"),
        patch.object(operator, "get_watched_namespaces", return_value=None),
        patch("kopf.run") as run,
    ):
        operator.main()

    run.assert_called_once_with(clusterwide=True)


def test_main_runs_namespaced():
    with (
        patch.object(operator, "configure_logging"),
        patch.object(operator, "get_watched_namespaces", return_value=["team-a"]),
        patch("kopf.run") as run,
    ):
        operator.main()

    run.assert_called_once_with(namespaces=["team-a"])
