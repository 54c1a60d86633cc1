"""
Store package - typed access to cluster state.

Contains:
- base.py: the ObjectStore protocol the reconcilers depend on
- scheme.py: the registry of kinds the operator can store
- kubernetes.py: the ObjectStore backed by the Kubernetes API
"""

from .base import ObjectStore
from .kubernetes import KubernetesObjectStore
from .scheme import ResourceKind, Scheme, default_scheme

__all__ = [
    "ObjectStore",
    "KubernetesObjectStore",
    "ResourceKind",
    "Scheme",
    "default_scheme",
]
