"""
Common models shared across different resource types.

This module defines the object metadata carried by every Marina custom
resource, the base class for primary resources and the request/result
types exchanged between the dispatcher and the reconcilers.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class ObjectMeta(BaseModel):
    """Subset of Kubernetes object metadata the operator reads or writes.

    Unknown metadata fields (managedFields, creationTimestamp, ...) are kept
    so that writing the object back does not drop them.
    """

    model_config = {"populate_by_name": True, "extra": "allow"}

    name: str = Field(..., description="Object name")
    namespace: str = Field("default", description="Object namespace")
    uid: str | None = Field(None, description="Server assigned unique id")
    resource_version: str | None = Field(
        None,
        alias="resourceVersion",
        description="Opaque version used for optimistic concurrency",
    )
    generation: int | None = Field(None, description="Spec generation")
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    finalizers: list[str] = Field(default_factory=list)
    deletion_timestamp: datetime | None = Field(
        None,
        alias="deletionTimestamp",
        description="Set by the API server once deletion was requested",
    )

    @field_validator("labels", "annotations", "finalizers", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any, info: ValidationInfo) -> Any:
        # The API server sends null for empty maps and lists
        if v is None:
            return [] if info.field_name == "finalizers" else {}
        return v


class MarinaResource(BaseModel):
    """Base class for the primary resources watched by the operator."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    api_version: str = Field(..., alias="apiVersion")
    kind: str
    metadata: ObjectMeta

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def is_being_deleted(self) -> bool:
        """True once the API server has stamped a deletion timestamp."""
        return self.metadata.deletion_timestamp is not None

    def to_k8s_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase dictionary the Kubernetes API expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ReconcileRequest(BaseModel):
    """Identity of the primary object a reconciliation pass is for."""

    model_config = {"frozen": True}

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class ReconcileResult(BaseModel):
    """Outcome of a successful reconciliation pass."""

    requeue: bool = Field(False, description="Schedule another pass")
    requeue_after: float | None = Field(
        None, description="Seconds to wait before the next pass"
    )
