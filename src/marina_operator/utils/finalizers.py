"""Finalizer bookkeeping on a primary resource's metadata.

All helpers mutate the in-memory object only; the reconciler decides when
the primary is written back.
"""

from marina_operator.models import MarinaResource


def has_finalizer(resource: MarinaResource, finalizer: str) -> bool:
    return finalizer in resource.metadata.finalizers


def add_finalizer(resource: MarinaResource, finalizer: str) -> bool:
    """Append the finalizer if missing. Returns True if it was added."""
    if has_finalizer(resource, finalizer):
        return False
    resource.metadata.finalizers.append(finalizer)
    return True


def remove_finalizer(resource: MarinaResource, finalizer: str) -> bool:
    """Drop every occurrence of the finalizer. Returns True if any was removed."""
    if not has_finalizer(resource, finalizer):
        return False
    resource.metadata.finalizers = [
        f for f in resource.metadata.finalizers if f != finalizer
    ]
    return True
