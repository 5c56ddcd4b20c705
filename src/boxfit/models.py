"""
Boundary models for the boxfit container packing project.

These pydantic models describe what crosses the engine boundary:

- `BoxSpec`, `ExpandedBox`: user box definitions, or already expanded units.
- `Constraints`: per-axis fixed sizes (None = free, to be minimized).
- `MonteCarloConfig`: attempt budgets of the search.
- `OptimizeRequest`: the `start` request of a run.
- `OptimizationResult`: the outcome of a run.
- `ProgressMessage`, `CompleteMessage`, `ErrorMessage`: the message channel.

Field names are snake_case; the camelCase names of the wire format
(`allowRotation`, `placedBoxes`, ...) are accepted as aliases and produced
by `to_payload()`.

Internally the engine works on the plain dataclasses of `boxfit.geometry`.
"""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import (
    FINAL_ATTEMPTS_DEFAULT,
    MAX_BOX_QUANTITY,
    SEARCH_ATTEMPTS_DEFAULT,
    SIMPLE_ATTEMPTS,
)
from .geometry import BoxId, BoxInstance, Container, PlacedBox, expand_box_specs


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class BoxSpec(BaseModel):
    """A user-authored box definition."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: BoxId = Field(description="Identifier of the box definition")
    width: float = Field(gt=0, description="Width (x extent)")
    height: float = Field(gt=0, description="Height (y extent)")
    depth: float = Field(gt=0, description="Depth (z extent)")
    quantity: int = Field(default=1, ge=1, le=MAX_BOX_QUANTITY, description="Number of identical units")


class ExpandedBox(BaseModel):
    """One physical unit, as produced by expanding a `BoxSpec`."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    instance_id: int = Field(ge=0, alias="instanceId")
    definition_id: BoxId = Field(alias="definitionId")
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    depth: float = Field(gt=0)

    def to_instance(self) -> BoxInstance:
        return BoxInstance(
            instance_id=self.instance_id,
            definition_id=self.definition_id,
            width=self.width,
            height=self.height,
            depth=self.depth,
        )


class Constraints(BaseModel):
    """Per-axis container constraints. None means the axis is free."""

    model_config = ConfigDict(extra="forbid")

    width: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)
    depth: Optional[float] = Field(default=None, gt=0)

    def as_dict(self) -> dict:
        return {"width": self.width, "height": self.height, "depth": self.depth}


class MonteCarloConfig(BaseModel):
    """Attempt budgets of the container search."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    search_attempts: int = Field(default=SEARCH_ATTEMPTS_DEFAULT, ge=1, alias="searchAttempts")
    final_attempts: int = Field(default=FINAL_ATTEMPTS_DEFAULT, ge=1, alias="finalAttempts")
    use_noise: bool = Field(default=True, alias="useNoise")

    @classmethod
    def simple(cls) -> "MonteCarloConfig":
        """Budget of the simpler legacy heuristic: 3 attempts, no noise."""
        return cls(search_attempts=SIMPLE_ATTEMPTS, final_attempts=SIMPLE_ATTEMPTS, use_noise=False)


class OptimizeRequest(BaseModel):
    """
    The `start` request of an optimization run.

    `boxes` holds either box definitions (expanded by quantity) or
    already expanded units, not a mix of both. `max_attempts` is accepted
    for compatibility with older clients and is not used by the engine.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    boxes: List[Union[ExpandedBox, BoxSpec]] = Field(min_length=1)
    constraints: Constraints = Field(default_factory=Constraints)
    allow_rotation: bool = Field(default=False, alias="allowRotation")
    max_attempts: Optional[int] = Field(default=None, ge=1, alias="maxAttempts")
    monte_carlo_config: MonteCarloConfig = Field(default_factory=MonteCarloConfig, alias="monteCarloConfig")

    @model_validator(mode="after")
    def _single_box_kind(self) -> "OptimizeRequest":
        kinds = {type(b) for b in self.boxes}
        if len(kinds) > 1:
            raise ValueError("boxes must be all definitions or all expanded units, not a mix")
        return self

    def instances(self) -> List[BoxInstance]:
        """Box instances to pack, in request order."""
        if isinstance(self.boxes[0], ExpandedBox):
            return [b.to_instance() for b in self.boxes]
        return expand_box_specs(self.boxes)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

FailureKind = Literal["infeasible", "configuration"]


class OptimizationResult(BaseModel):
    """
    Outcome of one run.

    `success` is False only when nothing could be packed or the request was
    invalid. A partial placement is a success with fewer placed boxes than
    `total_boxes`; deciding whether that is acceptable is up to the caller.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    container: Optional[Container] = None
    placed_boxes: List[PlacedBox] = Field(default_factory=list, alias="placedBoxes")
    execution_time_ms: int = Field(default=0, alias="executionTimeMs")
    total_boxes: int = Field(default=0, alias="totalBoxes")
    warnings: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    failure_kind: Optional[FailureKind] = Field(default=None, alias="failureKind")

    @property
    def placed_count(self) -> int:
        return len(self.placed_boxes)

    @property
    def all_placed(self) -> bool:
        return self.success and self.placed_count == self.total_boxes

    def to_payload(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Message channel
# ---------------------------------------------------------------------------

class ProgressMessage(BaseModel):
    type: Literal["progress"] = "progress"
    message: str
    progress: int = Field(ge=0, le=100)


class CompleteMessage(BaseModel):
    type: Literal["complete"] = "complete"
    result: OptimizationResult


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    error: str


WorkerMessage = Union[ProgressMessage, CompleteMessage, ErrorMessage]


__all__ = [
    "BoxSpec",
    "ExpandedBox",
    "Constraints",
    "MonteCarloConfig",
    "OptimizeRequest",
    "FailureKind",
    "OptimizationResult",
    "ProgressMessage",
    "CompleteMessage",
    "ErrorMessage",
    "WorkerMessage",
]
