"""
Utils package - Utility modules for Marina operator functionality.

Contains helper modules for:
- Building the Kubernetes objects derived from Terminals and Users
- Finalizer bookkeeping on primary resources
"""

from marina_operator.utils.finalizers import (
    add_finalizer,
    has_finalizer,
    remove_finalizer,
)

__all__ = [
    "add_finalizer",
    "has_finalizer",
    "remove_finalizer",
]
