"""Stored mission schema.

This module defines the strongly typed mission tree accepted by the
mission store. Models forbid unknown fields so leftovers from an
incomplete migration surface as schema violations instead of being
silently persisted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.constants import (
    HEX_COLOR_PATTERN,
    MAX_ACTION_NAME_LENGTH,
    MAX_EFFECT_NAME_LENGTH,
    MAX_FORCE_COUNT,
    MAX_FORCE_NAME_LENGTH,
    MAX_MISSION_NAME_LENGTH,
    MAX_NODE_NAME_LENGTH,
    MAX_PROCESS_TIME_MS,
    MIN_FORCE_COUNT,
    MIN_NODES_PER_FORCE,
)
from core.errors import SortieSchemaViolation


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, strict=True)


def _integral_float_to_int(value: Any) -> Any:
    """Accept whole-number floats such as 50.0 for integer fields."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class EffectModel(_StrictModel):
    """Effect applied when an action executes."""

    id: str = Field(alias="_id")
    name: str = Field(max_length=MAX_EFFECT_NAME_LENGTH)
    description: str = ""
    targetEnvironmentVersion: str | None = None
    targetId: str | None = None
    args: dict[str, Any] = Field(default_factory=dict)


class ActionModel(_StrictModel):
    """Action a participant can take on a node."""

    id: str = Field(alias="_id")
    name: str = Field(max_length=MAX_ACTION_NAME_LENGTH)
    description: str = ""
    processTime: float = Field(ge=0, le=MAX_PROCESS_TIME_MS)
    successChance: float = Field(ge=0, le=1)
    resourceCost: int = Field(ge=0)
    postExecutionSuccessText: str = ""
    postExecutionFailureText: str = ""
    effects: list[EffectModel]

    @field_validator("processTime", "successChance", mode="before")
    @classmethod
    def _reject_booleans(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number")
        return value

    @field_validator("resourceCost", mode="before")
    @classmethod
    def _accept_integral_cost(cls, value: Any) -> Any:
        return _integral_float_to_int(value)


class NodeModel(_StrictModel):
    """Runtime node instantiated from one prototype within a force."""

    id: str = Field(alias="_id")
    prototypeId: str
    name: str = Field(max_length=MAX_NODE_NAME_LENGTH)
    color: str = Field(pattern=HEX_COLOR_PATTERN)
    description: str = ""
    preExecutionText: str = ""
    executable: bool
    device: bool
    actions: list[ActionModel]


class ForceModel(_StrictModel):
    """Force owning its own copy of the mission's nodes."""

    id: str = Field(alias="_id")
    introMessage: str
    name: str = Field(max_length=MAX_FORCE_NAME_LENGTH)
    color: str = Field(pattern=HEX_COLOR_PATTERN)
    initialResources: int = Field(ge=0)
    nodes: list[NodeModel] = Field(min_length=MIN_NODES_PER_FORCE)

    @field_validator("initialResources", mode="before")
    @classmethod
    def _accept_integral_resources(cls, value: Any) -> Any:
        return _integral_float_to_int(value)


class PrototypeModel(_StrictModel):
    """Structural position shared by every node instantiated at it."""

    id: str = Field(alias="_id")
    structureKey: str
    depthPadding: int = Field(ge=0)

    @field_validator("depthPadding", mode="before")
    @classmethod
    def _accept_integral_padding(cls, value: Any) -> Any:
        return _integral_float_to_int(value)


class MissionModel(_StrictModel):
    """Complete stored mission."""

    id: str | None = Field(default=None, alias="_id")
    name: str = Field(max_length=MAX_MISSION_NAME_LENGTH)
    versionNumber: int
    seed: str | None = None
    structure: dict[str, Any]
    prototypes: list[PrototypeModel]
    forces: list[ForceModel] = Field(min_length=MIN_FORCE_COUNT, max_length=MAX_FORCE_COUNT)
    createdBy: str | None = None
    createdByUsername: str | None = None

    @field_validator("versionNumber", mode="before")
    @classmethod
    def _accept_integral_version(cls, value: Any) -> Any:
        return _integral_float_to_int(value)


def parse_mission(document: dict[str, Any]) -> MissionModel:
    """Validate a mission document against the stored schema.

    Args:
        document: Fully migrated mission document.

    Returns:
        Typed mission model.

    Raises:
        SortieSchemaViolation: If any field is missing, invalid, or unknown.
    """
    try:
        return MissionModel.model_validate(document)
    except ValidationError as error:
        raise _build_schema_violation(error) from error


def dump_mission(mission: MissionModel) -> dict[str, Any]:
    """Render a typed mission back into its stored JSON shape."""
    return mission.model_dump(mode="json", by_alias=True)


def _build_schema_violation(error: ValidationError) -> SortieSchemaViolation:
    """Summarize pydantic errors into one schema violation."""
    unknown_fields: list[str] = []
    problems: list[str] = []
    for detail in error.errors():
        path = ".".join(str(part) for part in detail["loc"])
        if detail["type"] == "extra_forbidden":
            unknown_fields.append(path)
        problems.append(f"{path}: {detail['msg']}")
    message = "Mission validation failed: " + "; ".join(problems) + "."
    return SortieSchemaViolation(message, unknown_fields=unknown_fields)
