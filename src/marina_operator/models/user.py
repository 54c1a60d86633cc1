"""
Pydantic models for User resources.

A User is backed by a ServiceAccount and is granted the permissions of
each Role named in its spec through one RoleBinding per role.
"""

from typing import Literal

from pydantic import BaseModel, Field

from marina_operator.constants import MARINA_API_VERSION, USER_KIND

from .common import MarinaResource


class UserSpec(BaseModel):
    """Desired state of a User.

    Roles are kept in the order given and are not deduplicated.
    """

    model_config = {"populate_by_name": True, "extra": "allow"}

    name: str | None = Field(None, description="Login name of the user")
    password: str | None = Field(
        None, description="Base64 encoded password, not used by the operator"
    )
    roles: list[str] = Field(
        default_factory=list, description="Names of Roles bound to the user"
    )


class User(MarinaResource):
    """A User custom resource."""

    api_version: str = Field(MARINA_API_VERSION, alias="apiVersion")
    kind: Literal["User"] = USER_KIND
    spec: UserSpec = Field(default_factory=UserSpec)
