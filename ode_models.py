"""
Core data structures shared by the compiler, the integrator and the sessions.

These are plain value objects; rendering code reads them but never writes back.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, NamedTuple, Optional, Tuple


class Point(NamedTuple):
    x: float
    y: float


Trajectory = List[Point]


class FieldSample(NamedTuple):
    """One slope-field grid entry."""

    x: float
    y: float
    slope: float


class SessionState(Enum):
    IDLE = auto()
    COMPILING = auto()
    READY = auto()
    COMPILE_ERROR = auto()


@dataclass
class SolutionStep:
    """A single entry of the step-by-step explanation panel."""

    index: int
    description: str
    result_text: str
    kind: str = "info"  # "info" or "error"

    @property
    def is_error(self) -> bool:
        return self.kind == "error"


@dataclass
class SolveResult:
    trajectory: Trajectory = field(default_factory=list)
    steps: List[SolutionStep] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SolutionCurve:
    """
    A user-seeded curve of the slope-field view.

    ``points`` is the backward run (reversed) followed by the forward run; the
    seed appears exactly once, at index ``seed_index``.
    """

    id: int
    seed: Point
    points: Tuple[Point, ...]
    color_index: int
    seed_index: int = 0

    @property
    def point_count(self) -> int:
        return len(self.points)


def trajectory_xy(points):
    """Split a point sequence into two plain lists (xs, ys) for plotting."""
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return xs, ys
