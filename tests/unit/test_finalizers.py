"""
Test finalizer bookkeeping helpers.

The reconcilers rely on these helpers mutating the in-memory object only
and reporting whether anything changed.
"""

from marina_operator.constants import (
    TERMINAL_DEPLOYMENT_FINALIZER,
    TERMINAL_SERVICE_FINALIZER,
)
from marina_operator.utils.finalizers import (
    add_finalizer,
    has_finalizer,
    remove_finalizer,
)
from tests.fixtures.marina_resources import make_terminal


def test_add_finalizer_appends_once():
    terminal = make_terminal()

    assert add_finalizer(terminal, TERMINAL_DEPLOYMENT_FINALIZER) is True
    assert add_finalizer(terminal, TERMINAL_DEPLOYMENT_FINALIZER) is False
    assert terminal.metadata.finalizers == [TERMINAL_DEPLOYMENT_FINALIZER]


def test_add_finalizer_keeps_order():
    terminal = make_terminal()

    add_finalizer(terminal, TERMINAL_DEPLOYMENT_FINALIZER)
    add_finalizer(terminal, TERMINAL_SERVICE_FINALIZER)

    assert terminal.metadata.finalizers == [
        TERMINAL_DEPLOYMENT_FINALIZER,
        TERMINAL_SERVICE_FINALIZER,
    ]


def test_remove_finalizer_leaves_others():
    terminal = make_terminal()
    terminal.metadata.finalizers = [
        "example.com/keep",
        TERMINAL_DEPLOYMENT_FINALIZER,
        TERMINAL_SERVICE_FINALIZER,
    ]

    assert remove_finalizer(terminal, TERMINAL_DEPLOYMENT_FINALIZER) is True
    assert terminal.metadata.finalizers == [
        "example.com/keep",
        TERMINAL_SERVICE_FINALIZER,
    ]


def test_remove_finalizer_drops_duplicates():
    terminal = make_terminal()
    terminal.metadata.finalizers = [
        TERMINAL_SERVICE_FINALIZER,
        TERMINAL_SERVICE_FINALIZER,
    ]

    remove_finalizer(terminal, TERMINAL_SERVICE_FINALIZER)

    assert not has_finalizer(terminal, TERMINAL_SERVICE_FINALIZER)


def test_remove_absent_finalizer_is_noop():
    terminal = make_terminal()

    assert remove_finalizer(terminal, TERMINAL_SERVICE_FINALIZER) is False
    assert terminal.metadata.finalizers == []
