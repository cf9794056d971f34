"""Pydantic models for YAML agent definition validation.

These mirror flowagent/types.py structures but accept the shorter keys
people write by hand (integration/operation) and coerce them to the
runtime models.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from flowagent.types import AgentStatus


class StepYAML(BaseModel):
    """Validated schema for one step entry in an agent file."""

    id: str
    integration: str
    operation: str
    name: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("parameters", mode="before")
    @classmethod
    def coerce_parameters(cls, v):
        # Generated workflows sometimes carry parameters as [{key, value}, ...]
        if isinstance(v, list):
            return {p["key"]: p.get("value") for p in v if isinstance(p, dict) and p.get("key")}
        return v or {}


class AgentYAML(BaseModel):
    """Root schema for an agent file."""

    id: str
    name: str
    description: str = ""
    system_prompt: Optional[str] = None
    status: AgentStatus = AgentStatus.INACTIVE
    trigger: Optional[StepYAML] = None
    branches: list[list[StepYAML]] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v):
        if isinstance(v, str):
            return AgentStatus(v.lower())
        return v
