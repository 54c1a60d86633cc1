"""
Marina Operator - A Kubernetes operator for shell terminals and their users.

This operator keeps Marina custom resources in sync with native objects:
- Terminal resources become a Deployment and an SSH Service
- User resources become a ServiceAccount and one RoleBinding per role
- Teardown is driven by per-dependent finalizers
"""

__version__ = "0.1.0"
