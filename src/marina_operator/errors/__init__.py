"""
Error handling module for the Marina operator.

This module provides a comprehensive error hierarchy that integrates with kopf
and provides clear categorization for different types of failures.
"""

from .operator_errors import (
    AlreadyExistsError,
    ConflictError,
    ExternalServiceError,
    KubernetesAPIError,
    NotFoundError,
    OperatorError,
    PermanentError,
    ReconciliationError,
    RoleNotFoundError,
    TemporaryError,
    ValidationError,
)

__all__ = [
    "OperatorError",
    "ValidationError",
    "TemporaryError",
    "PermanentError",
    "ExternalServiceError",
    "KubernetesAPIError",
    "NotFoundError",
    "AlreadyExistsError",
    "ConflictError",
    "ReconciliationError",
    "RoleNotFoundError",
]
