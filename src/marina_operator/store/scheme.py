"""
Registry of the resource kinds the operator knows how to store.

A Scheme is built once at start-up and handed to the object store; nothing
in the operator consults a process-wide registry.
"""

from dataclasses import dataclass
from typing import Any

from kubernetes import client

from marina_operator.constants import (
    DEPLOYMENT_KIND,
    MARINA_GROUP,
    MARINA_VERSION,
    RBAC_API_GROUP,
    ROLE_BINDING_KIND,
    ROLE_KIND,
    SERVICE_ACCOUNT_KIND,
    SERVICE_KIND,
    TERMINAL_KIND,
    TERMINAL_PLURAL,
    USER_KIND,
    USER_PLURAL,
)
from marina_operator.errors import PermanentError
from marina_operator.models import MarinaResource, Terminal, User


@dataclass(frozen=True)
class ResourceKind:
    """How to reach one kind through the Kubernetes API.

    Native kinds name a typed API class and the suffix of its
    ``*_namespaced_<suffix>`` methods. Custom kinds name the pydantic model
    used to parse ``CustomObjectsApi`` payloads.
    """

    kind: str
    group: str
    version: str
    plural: str
    api: type | None = None
    method_suffix: str | None = None
    model: type[MarinaResource] | None = None

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @property
    def is_custom(self) -> bool:
        return self.model is not None


class Scheme:
    """Set of known kinds keyed by kind name."""

    def __init__(self, kinds: list[ResourceKind] | None = None):
        self._kinds: dict[str, ResourceKind] = {}
        for resource_kind in kinds or []:
            self.register(resource_kind)

    def register(self, resource_kind: ResourceKind) -> None:
        if resource_kind.kind in self._kinds:
            raise ValueError(f"kind {resource_kind.kind} is already registered")
        if resource_kind.model is None and (
            resource_kind.api is None or resource_kind.method_suffix is None
        ):
            raise ValueError(
                f"native kind {resource_kind.kind} needs an api class and method suffix"
            )
        self._kinds[resource_kind.kind] = resource_kind

    def lookup(self, kind: str) -> ResourceKind:
        try:
            return self._kinds[kind]
        except KeyError:
            raise PermanentError(
                f"kind {kind} is not registered with the operator scheme",
                user_action="Register the kind when building the scheme",
            ) from None

    def kind_of(self, obj: Any) -> ResourceKind:
        """Resolve the registered kind of a native or custom object."""
        kind = getattr(obj, "kind", None)
        if not kind:
            raise PermanentError(f"object {obj!r} does not declare its kind")
        return self.lookup(kind)

    def __contains__(self, kind: str) -> bool:
        return kind in self._kinds

    @property
    def kinds(self) -> list[str]:
        return sorted(self._kinds)


def default_scheme() -> Scheme:
    """Scheme with every kind the Terminal and User reconcilers touch."""
    return Scheme(
        [
            ResourceKind(
                kind=DEPLOYMENT_KIND,
                group="apps",
                version="v1",
                plural="deployments",
                api=client.AppsV1Api,
                method_suffix="deployment",
            ),
            ResourceKind(
                kind=SERVICE_KIND,
                group="",
                version="v1",
                plural="services",
                api=client.CoreV1Api,
                method_suffix="service",
            ),
            ResourceKind(
                kind=SERVICE_ACCOUNT_KIND,
                group="",
                version="v1",
                plural="serviceaccounts",
                api=client.CoreV1Api,
                method_suffix="service_account",
            ),
            ResourceKind(
                kind=ROLE_KIND,
                group=RBAC_API_GROUP,
                version="v1",
                plural="roles",
                api=client.RbacAuthorizationV1Api,
                method_suffix="role",
            ),
            ResourceKind(
                kind=ROLE_BINDING_KIND,
                group=RBAC_API_GROUP,
                version="v1",
                plural="rolebindings",
                api=client.RbacAuthorizationV1Api,
                method_suffix="role_binding",
            ),
            ResourceKind(
                kind=TERMINAL_KIND,
                group=MARINA_GROUP,
                version=MARINA_VERSION,
                plural=TERMINAL_PLURAL,
                model=Terminal,
            ),
            ResourceKind(
                kind=USER_KIND,
                group=MARINA_GROUP,
                version=MARINA_VERSION,
                plural=USER_PLURAL,
                model=User,
            ),
        ]
    )
