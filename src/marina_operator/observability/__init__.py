"""
Observability utilities for the Marina operator.

This module provides structured logging with correlation IDs for
production troubleshooting.
"""

from .logging import OperatorLogger, setup_structured_logging

__all__ = [
    "OperatorLogger",
    "setup_structured_logging",
]
