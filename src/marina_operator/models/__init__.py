"""
Models package - Pydantic models for type-safe resource handling.

Defines data models for:
- Terminal specifications
- User specifications
- Reconcile requests and results
"""

from .common import MarinaResource, ObjectMeta, ReconcileRequest, ReconcileResult
from .terminal import Terminal, TerminalSpec
from .user import User, UserSpec

__all__ = [
    "MarinaResource",
    "ObjectMeta",
    "ReconcileRequest",
    "ReconcileResult",
    "Terminal",
    "TerminalSpec",
    "User",
    "UserSpec",
]
