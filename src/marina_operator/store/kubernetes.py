"""
Object store backed by the Kubernetes API.

Native kinds go through the typed client APIs (AppsV1Api, CoreV1Api,
RbacAuthorizationV1Api); Marina kinds go through CustomObjectsApi and are
parsed into their pydantic models. ApiExceptions are translated into the
operator's store error taxonomy.
"""

import json
import logging
from typing import Any

import pydantic
from kubernetes import client
from kubernetes.client.rest import ApiException

from marina_operator.errors import (
    AlreadyExistsError,
    ConflictError,
    KubernetesAPIError,
    NotFoundError,
    ValidationError,
)

from .scheme import ResourceKind, Scheme

logger = logging.getLogger(__name__)


def _status_reason(e: ApiException) -> str | None:
    """Extract the machine readable reason from a Status response body."""
    if not e.body:
        return e.reason
    try:
        body = json.loads(e.body)
    except (TypeError, ValueError):
        return e.reason
    if isinstance(body, dict):
        return body.get("reason") or e.reason
    return e.reason


def translate_api_exception(
    e: ApiException, operation: str, kind: str, namespace: str, name: str
) -> KubernetesAPIError:
    """Map an ApiException onto NotFound/AlreadyExists/Conflict/other."""
    if e.status == 404:
        return NotFoundError(kind, namespace, name)
    if e.status == 409:
        reason = _status_reason(e)
        if operation == "create" or reason == "AlreadyExists":
            return AlreadyExistsError(kind, namespace, name)
        return ConflictError(kind, namespace, name)

    # 5xx and throttling are retryable, other client errors are not
    retryable = e.status is None or e.status >= 500 or e.status == 429
    return KubernetesAPIError(
        message=f"failed to {operation} {kind} {namespace}/{name}: HTTP {e.status}",
        reason=_status_reason(e),
        retryable=retryable,
        status=e.status,
    )


class KubernetesObjectStore:
    """ObjectStore implementation on top of the official kubernetes client."""

    def __init__(self, api_client: client.ApiClient, scheme: Scheme):
        self.api_client = api_client
        self.scheme = scheme
        self._apis: dict[type, Any] = {}

    def _typed_api(self, resource_kind: ResourceKind) -> Any:
        api_class = resource_kind.api
        if api_class not in self._apis:
            self._apis[api_class] = api_class(self.api_client)
        return self._apis[api_class]

    @property
    def _custom_api(self) -> client.CustomObjectsApi:
        if client.CustomObjectsApi not in self._apis:
            self._apis[client.CustomObjectsApi] = client.CustomObjectsApi(
                self.api_client
            )
        return self._apis[client.CustomObjectsApi]

    def _method(self, resource_kind: ResourceKind, verb: str):
        return getattr(
            self._typed_api(resource_kind),
            f"{verb}_namespaced_{resource_kind.method_suffix}",
        )

    def _parse(self, resource_kind: ResourceKind, raw: dict[str, Any]) -> Any:
        try:
            return resource_kind.model.model_validate(raw)
        except pydantic.ValidationError as e:
            metadata = raw.get("metadata", {})
            raise ValidationError(
                f"{resource_kind.kind} {metadata.get('namespace')}/"
                f"{metadata.get('name')} is invalid: {e}"
            ) from e

    def get(self, kind: str, namespace: str, name: str) -> Any:
        resource_kind = self.scheme.lookup(kind)
        logger.debug(f"Reading {kind} {namespace}/{name}")
        try:
            if resource_kind.is_custom:
                raw = self._custom_api.get_namespaced_custom_object(
                    group=resource_kind.group,
                    version=resource_kind.version,
                    namespace=namespace,
                    plural=resource_kind.plural,
                    name=name,
                )
                return self._parse(resource_kind, raw)
            return self._method(resource_kind, "read")(name=name, namespace=namespace)
        except ApiException as e:
            raise translate_api_exception(e, "get", kind, namespace, name) from e

    def create(self, obj: Any) -> Any:
        resource_kind = self.scheme.kind_of(obj)
        namespace, name = obj.metadata.namespace, obj.metadata.name
        try:
            if resource_kind.is_custom:
                raw = self._custom_api.create_namespaced_custom_object(
                    group=resource_kind.group,
                    version=resource_kind.version,
                    namespace=namespace,
                    plural=resource_kind.plural,
                    body=obj.to_k8s_dict(),
                )
                return self._parse(resource_kind, raw)
            return self._method(resource_kind, "create")(namespace=namespace, body=obj)
        except ApiException as e:
            raise translate_api_exception(
                e, "create", resource_kind.kind, namespace, name
            ) from e

    def update(self, obj: Any) -> Any:
        resource_kind = self.scheme.kind_of(obj)
        namespace, name = obj.metadata.namespace, obj.metadata.name
        try:
            if resource_kind.is_custom:
                raw = self._custom_api.replace_namespaced_custom_object(
                    group=resource_kind.group,
                    version=resource_kind.version,
                    namespace=namespace,
                    plural=resource_kind.plural,
                    name=name,
                    body=obj.to_k8s_dict(),
                )
                return self._parse(resource_kind, raw)
            return self._method(resource_kind, "replace")(
                name=name, namespace=namespace, body=obj
            )
        except ApiException as e:
            raise translate_api_exception(
                e, "update", resource_kind.kind, namespace, name
            ) from e

    def delete(self, obj: Any) -> None:
        resource_kind = self.scheme.kind_of(obj)
        namespace, name = obj.metadata.namespace, obj.metadata.name
        try:
            if resource_kind.is_custom:
                self._custom_api.delete_namespaced_custom_object(
                    group=resource_kind.group,
                    version=resource_kind.version,
                    namespace=namespace,
                    plural=resource_kind.plural,
                    name=name,
                )
            else:
                self._method(resource_kind, "delete")(name=name, namespace=namespace)
        except ApiException as e:
            raise translate_api_exception(
                e, "delete", resource_kind.kind, namespace, name
            ) from e
