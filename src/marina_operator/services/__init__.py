"""
Service layer for the Marina operator.

This module provides reconciler services that handle the business logic
for managing Marina resources, separated from the kopf handler layer.
"""

from .base_reconciler import BaseReconciler
from .terminal_reconciler import TerminalReconciler
from .user_reconciler import UserReconciler

__all__ = [
    "BaseReconciler",
    "TerminalReconciler",
    "UserReconciler",
]
