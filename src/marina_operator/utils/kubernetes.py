"""
Kubernetes utilities for the Marina operator.

This module provides the client configuration helper and the builders for
every object derived from a primary resource. Builders are pure: names are
functions of the primary's name so that each pass can locate what a
previous pass created without keeping any state.
"""

import logging

from kubernetes import client, config

from marina_operator.constants import (
    DEPLOYMENT_KIND,
    OPERATOR_LABEL_KEY,
    OPERATOR_LABEL_VALUE,
    RBAC_API_GROUP,
    ROLE_BINDING_KIND,
    ROLE_BINDING_SEPARATOR,
    ROLE_KIND,
    SERVICE_ACCOUNT_KIND,
    SERVICE_KIND,
    SSH_PORT,
    SSH_PORT_NAME,
    TERMINAL_APP_LABELS,
    TERMINAL_CONTAINER_COMMAND,
    TERMINAL_CONTAINER_NAME,
    TERMINAL_LABEL_KEY,
    TERMINAL_REPLICAS,
    TERMINAL_RESOURCE_PREFIX,
    USER_LABEL_KEY,
)
from marina_operator.models import MarinaResource, Terminal, User

logger = logging.getLogger(__name__)


def get_kubernetes_client() -> client.ApiClient:
    """
    Get configured Kubernetes API client.

    Tries the in-cluster service account first and falls back to the local
    kubeconfig for development.

    Returns:
        Configured Kubernetes API client
    """
    try:
        config.load_incluster_config()
        logger.debug("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        try:
            config.load_kube_config()
            logger.debug("Loaded kubeconfig from local environment")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    return client.ApiClient()


def terminal_resource_name(terminal_name: str) -> str:
    """Name shared by a Terminal's Deployment and Service."""
    return f"{TERMINAL_RESOURCE_PREFIX}{terminal_name}"


def service_account_name(user_name: str) -> str:
    return user_name


def role_binding_name(user_name: str, role: str) -> str:
    return f"{user_name}{ROLE_BINDING_SEPARATOR}{role}"


def terminal_labels(terminal: Terminal) -> dict[str, str]:
    """Labels carried by the Deployment, its pods and the Service selector."""
    return {
        **TERMINAL_APP_LABELS,
        TERMINAL_LABEL_KEY: terminal.name,
        OPERATOR_LABEL_KEY: OPERATOR_LABEL_VALUE,
    }


def user_labels(user: User) -> dict[str, str]:
    return {
        USER_LABEL_KEY: user.name,
        OPERATOR_LABEL_KEY: OPERATOR_LABEL_VALUE,
    }


def owner_references_for(owner: MarinaResource) -> list[client.V1OwnerReference] | None:
    """
    Owner reference pointing at a primary resource.

    Returns None while the owner has no uid (it was never persisted), in
    which case the derived object is created without an owner.
    """
    if not owner.metadata.uid:
        return None
    return [
        client.V1OwnerReference(
            api_version=owner.api_version,
            kind=owner.kind,
            name=owner.name,
            uid=owner.metadata.uid,
            controller=True,
            block_owner_deletion=True,
        )
    ]


def deployment_for_terminal(terminal: Terminal) -> client.V1Deployment:
    """Desired single-replica Deployment running the Terminal's image."""
    labels = terminal_labels(terminal)

    container = client.V1Container(
        name=TERMINAL_CONTAINER_NAME,
        image=terminal.spec.image,
        command=list(TERMINAL_CONTAINER_COMMAND),
        ports=[
            client.V1ContainerPort(
                name=SSH_PORT_NAME, container_port=SSH_PORT, protocol="TCP"
            )
        ],
    )

    return client.V1Deployment(
        api_version="apps/v1",
        kind=DEPLOYMENT_KIND,
        metadata=client.V1ObjectMeta(
            name=terminal_resource_name(terminal.name),
            namespace=terminal.namespace,
            labels=dict(labels),
            owner_references=owner_references_for(terminal),
        ),
        spec=client.V1DeploymentSpec(
            replicas=TERMINAL_REPLICAS,
            selector=client.V1LabelSelector(match_labels=dict(labels)),
            strategy=client.V1DeploymentStrategy(type="RollingUpdate"),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(labels=dict(labels)),
                spec=client.V1PodSpec(containers=[container]),
            ),
        ),
    )


def service_for_terminal(terminal: Terminal) -> client.V1Service:
    """Desired Service exposing the Terminal's SSH port."""
    return client.V1Service(
        api_version="v1",
        kind=SERVICE_KIND,
        metadata=client.V1ObjectMeta(
            name=terminal_resource_name(terminal.name),
            namespace=terminal.namespace,
            labels=terminal_labels(terminal),
            owner_references=owner_references_for(terminal),
        ),
        spec=client.V1ServiceSpec(
            selector=terminal_labels(terminal),
            ports=[
                client.V1ServicePort(
                    name=SSH_PORT_NAME,
                    protocol="TCP",
                    port=SSH_PORT,
                    target_port=SSH_PORT_NAME,
                )
            ],
        ),
    )


def service_account_for_user(user: User) -> client.V1ServiceAccount:
    return client.V1ServiceAccount(
        api_version="v1",
        kind=SERVICE_ACCOUNT_KIND,
        metadata=client.V1ObjectMeta(
            name=service_account_name(user.name),
            namespace=user.namespace,
            labels=user_labels(user),
            owner_references=owner_references_for(user),
        ),
    )


def role_binding_for_user(user: User, role: str) -> client.V1RoleBinding:
    """Desired RoleBinding granting an existing Role to the User's account."""
    return client.V1RoleBinding(
        api_version=f"{RBAC_API_GROUP}/v1",
        kind=ROLE_BINDING_KIND,
        metadata=client.V1ObjectMeta(
            name=role_binding_name(user.name, role),
            namespace=user.namespace,
            labels=user_labels(user),
            owner_references=owner_references_for(user),
        ),
        subjects=[
            client.RbacV1Subject(
                kind=SERVICE_ACCOUNT_KIND,
                name=service_account_name(user.name),
                namespace=user.namespace,
            )
        ],
        role_ref=client.V1RoleRef(
            api_group=RBAC_API_GROUP,
            kind=ROLE_KIND,
            name=role,
        ),
    )
