"""
Pydantic models for Terminal resources.

A Terminal asks for a long-running shell container reachable over SSH.
"""

from typing import Literal

from pydantic import BaseModel, Field

from marina_operator.constants import MARINA_API_VERSION, TERMINAL_KIND

from .common import MarinaResource


class TerminalSpec(BaseModel):
    """Desired state of a Terminal."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    # Left unvalidated: a Terminal must stay readable for teardown
    image: str = Field(..., description="Container image the terminal runs")


class Terminal(MarinaResource):
    """A Terminal custom resource."""

    api_version: str = Field(MARINA_API_VERSION, alias="apiVersion")
    kind: Literal["Terminal"] = TERMINAL_KIND
    spec: TerminalSpec
