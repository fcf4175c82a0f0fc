from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

Sense = Literal["min", "max"]
Relation = Literal["<=", "==", ">="]
SimplexStatus = Literal["optimal", "unbounded", "infeasible"]
ProgressPhase = Literal["initialization", "optimization", "finalization"]

_RELATION_ALIASES = {
    "<=": "<=",
    "≤": "<=",
    "lessOrEqual": "<=",
    "=": "==",
    "==": "==",
    "equal": "==",
    ">=": ">=",
    "≥": ">=",
    "greaterOrEqual": ">=",
}

_SENSE_ALIASES = {
    "max": "max",
    "maximize": "max",
    "min": "min",
    "minimize": "min",
}


class SimplexConstraint(BaseModel):
    """One linear constraint ``coefficients . x  relation  rhs``."""

    model_config = ConfigDict(frozen=True)

    coefficients: List[float]
    relation: Relation
    rhs: float

    @field_validator("coefficients", mode="before")
    @classmethod
    def _coerce_coefficients(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple, np.ndarray)):
            return np.asarray(value, dtype=float).reshape(-1).tolist()
        return value

    @field_validator("relation", mode="before")
    @classmethod
    def _normalise_relation(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _RELATION_ALIASES.get(value.strip(), value)
        return value


class SolveOptions(BaseModel):
    max_iters: int = Field(default=10_000, ge=0)
    tol: float = Field(default=1e-10, gt=0.0)


class SimplexResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    solution: List[float]
    objective_value: float
    status: SimplexStatus
    iterations: int
    message: str = ""


class SimplexProgress(BaseModel):
    """Progress update emitted by the async solver."""

    model_config = ConfigDict(frozen=True)

    iteration: int
    objective_value: float
    phase_label: str
    phase: ProgressPhase
    timestamp: datetime = Field(default_factory=datetime.now)
    status: Optional[SimplexStatus] = None


class LPProblem(BaseModel):
    name: str = "problem"
    sense: Sense
    objective: List[float]
    constraints: List[SimplexConstraint]

    @field_validator("sense", mode="before")
    @classmethod
    def _normalise_sense(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _SENSE_ALIASES.get(value.strip().lower(), value)
        return value
