"""
Constants used throughout the Marina operator.

This module defines all constant values used by the operator including:
- API coordinates of the Marina custom resources
- Finalizer names for cleanup coordination
- Resource labels and naming patterns
- Terminal workload defaults
"""

# API coordinates for the Marina custom resources
MARINA_GROUP = "core.marina.io"
MARINA_VERSION = "v1"
MARINA_API_VERSION = f"{MARINA_GROUP}/{MARINA_VERSION}"
TERMINAL_KIND = "Terminal"
TERMINAL_PLURAL = "terminals"
USER_KIND = "User"
USER_PLURAL = "users"

# Native kinds managed by the operator
DEPLOYMENT_KIND = "Deployment"
SERVICE_KIND = "Service"
SERVICE_ACCOUNT_KIND = "ServiceAccount"
ROLE_KIND = "Role"
ROLE_BINDING_KIND = "RoleBinding"
RBAC_API_GROUP = "rbac.authorization.k8s.io"

# Finalizer constants, one per dependent kind so teardown can resume
# from any partially completed state
TERMINAL_DEPLOYMENT_FINALIZER = "marina.io.deployment/finalizer"
TERMINAL_SERVICE_FINALIZER = "marina.io.service/finalizer"
USER_SERVICE_ACCOUNT_FINALIZER = "marina.io.serviceaccount/finalizer"
USER_ROLE_BINDING_FINALIZER = "marina.io.rolebinding/finalizer"

# Label constants for resource identification and management
OPERATOR_LABEL_KEY = "marina.io/managed-by"
OPERATOR_LABEL_VALUE = "marina-operator"
TERMINAL_LABEL_KEY = "marina.io/terminal"
USER_LABEL_KEY = "marina.io/user"
TERMINAL_APP_LABELS = {"app": "marina-terminal"}

# Resource naming patterns
TERMINAL_RESOURCE_PREFIX = "marina-terminal-"
ROLE_BINDING_SEPARATOR = "-"

# Terminal workload defaults
TERMINAL_CONTAINER_NAME = "exec-shell"
TERMINAL_CONTAINER_COMMAND = [
    "/bin/sh",
    "-ec",
    "trap : TERM INT; sleep infinity & wait",
]
TERMINAL_REPLICAS = 1
SSH_PORT = 22
SSH_PORT_NAME = "ssh"

# Retry configuration
DEFAULT_RETRY_DELAY = 30
