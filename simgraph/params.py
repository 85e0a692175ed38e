"""Execution parameters passed through a simulation step.

``ExecParams`` is what the driver hands to the visitors; mechanical and
constraint visitors derive their own parameter objects from it so each
phase sees the step size it should integrate with.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict


class VecId(Enum):
    """State vectors held by a mechanical state."""

    POSITION = "position"
    VELOCITY = "velocity"
    FORCE = "force"
    EXTERNAL_FORCE = "external_force"


@dataclass(frozen=True)
class ExecParams:
    """Parameters shared by every visitor of one step.

    Attributes:
        extra: Arbitrary component-family parameters, passed through untouched
    """

    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MechanicalParams(ExecParams):
    """Parameters for mechanical computations.

    Attributes:
        dt: Step size to integrate with
        m_factor: Mass matrix coefficient
        b_factor: Damping matrix coefficient
        k_factor: Stiffness matrix coefficient
    """

    dt: float = 0.0
    m_factor: float = 1.0
    b_factor: float = 0.0
    k_factor: float = 0.0

    @classmethod
    def from_exec(cls, params: ExecParams, dt: float) -> "MechanicalParams":
        """Derive mechanical parameters with step ``dt`` from ``params``."""
        if isinstance(params, MechanicalParams):
            return replace(params, dt=dt)
        return cls(extra=dict(params.extra), dt=dt)


@dataclass(frozen=True)
class ConstraintParams(ExecParams):
    """Parameters for constraint accumulation; rows are built at position level."""

    @classmethod
    def from_exec(cls, params: ExecParams) -> "ConstraintParams":
        return cls(extra=dict(params.extra))
