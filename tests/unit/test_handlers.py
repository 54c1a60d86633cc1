"""
Unit tests for the kopf handlers.

Handlers are thin adapters: they must route to the dispatcher with the
right kind and identity, map dependent events back to their owner, and
skip the initial listing of dependents.
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import kopf
import pytest

from marina_operator.constants import TERMINAL_LABEL_KEY, USER_LABEL_KEY
from marina_operator.handlers import terminal as terminal_handlers
from marina_operator.handlers import user as user_handlers


@pytest.fixture
def memo():
    memo = MagicMock()
    memo.dispatcher.dispatch = AsyncMock()
    return memo


class TestPrimaryHandlers:
    @pytest.mark.asyncio
    async def test_terminal_change_dispatches(self, memo):
        await terminal_handlers.reconcile_terminal(
            name="dev", namespace="default", memo=memo, spec={}
        )

        memo.dispatcher.dispatch.assert_awaited_once_with("Terminal", "default", "dev")

    @pytest.mark.asyncio
    async def test_terminal_delete_dispatches(self, memo):
        await terminal_handlers.finalize_terminal(
            name="dev", namespace="default", memo=memo
        )

        memo.dispatcher.dispatch.assert_awaited_once_with("Terminal", "default", "dev")

    @pytest.mark.asyncio
    async def test_user_change_dispatches(self, memo):
        await user_handlers.reconcile_user(name="alice", namespace="ns", memo=memo)

        memo.dispatcher.dispatch.assert_awaited_once_with("User", "ns", "alice")

    @pytest.mark.asyncio
    async def test_user_delete_dispatches(self, memo):
        await user_handlers.finalize_user(name="alice", namespace="ns", memo=memo)

        memo.dispatcher.dispatch.assert_awaited_once_with("User", "ns", "alice")

    @pytest.mark.asyncio
    async def test_entry_logged_at_configured_level(self, memo, caplog):
        with (
            patch.object(terminal_handlers.settings, "handler_entry_log_level", "DEBUG"),
            caplog.at_level(logging.DEBUG, logger=terminal_handlers.__name__),
        ):
            await terminal_handlers.finalize_terminal(
                name="dev", namespace="default", memo=memo
            )

        entry = caplog.records[-1]
        assert entry.levelno == logging.DEBUG
        assert entry.handler_type == "delete"
        assert entry.resource_name == "dev"

    @pytest.mark.asyncio
    async def test_dispatch_errors_propagate_to_kopf(self, memo):
        memo.dispatcher.dispatch.side_effect = kopf.TemporaryError("retry", delay=5)

        with pytest.raises(kopf.TemporaryError):
            await user_handlers.reconcile_user(
                name="alice", namespace="ns", memo=memo
            )


class TestDependentEvents:
    @pytest.mark.asyncio
    async def test_deployment_event_maps_to_terminal(self, memo):
        await terminal_handlers.terminal_dependent_changed(
            event={"type": "DELETED", "object": {}},
            labels={TERMINAL_LABEL_KEY: "dev"},
            namespace="default",
            memo=memo,
        )

        memo.dispatcher.dispatch.assert_awaited_once_with("Terminal", "default", "dev")

    @pytest.mark.asyncio
    async def test_role_binding_event_maps_to_user(self, memo):
        await user_handlers.user_dependent_changed(
            event={"type": "MODIFIED", "object": {}},
            labels={USER_LABEL_KEY: "alice"},
            namespace="ns",
            memo=memo,
        )

        memo.dispatcher.dispatch.assert_awaited_once_with("User", "ns", "alice")

    @pytest.mark.asyncio
    async def test_initial_listing_is_skipped(self, memo):
        await terminal_handlers.terminal_dependent_changed(
            event={"type": None, "object": {}},
            labels={TERMINAL_LABEL_KEY: "dev"},
            namespace="default",
            memo=memo,
        )

        memo.dispatcher.dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failures_are_logged_not_raised(self, memo, caplog):
        memo.dispatcher.dispatch.side_effect = kopf.TemporaryError("later")

        await user_handlers.user_dependent_changed(
            event={"type": "DELETED", "object": {}},
            labels={USER_LABEL_KEY: "alice"},
            namespace="ns",
            memo=memo,
        )

        assert "Reconciling User ns/alice" in caplog.text

    def test_owned_watch_can_be_disabled(self):
        with patch.object(terminal_handlers.settings, "watch_owned_resources", False):
            assert terminal_handlers._watch_owned() is False
        assert user_handlers._watch_owned() is True
