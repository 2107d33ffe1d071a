from dataclasses import dataclass, replace
from typing import Tuple


# Viewing rectangle (x_min, x_max, y_min, y_max)
DEFAULT_BOUNDS = (-5.0, 5.0, -5.0, 5.0)

# RK4 settings
DEFAULT_STEP = 0.05
DEFAULT_MAX_STEPS = 500
DEFAULT_INTERVAL_CEILING = 100_000

# Slope field
DEFAULT_GRID_DENSITY = 20
ARROW_FRACTION = 1.0 / 50.0   # arrow length as a fraction of the view span

# Guard rails
SINGULARITY_EPS = 1e-10
FALLBACK_SLOPE = 0.0

# Solver page defaults
DEFAULT_EQUATION = "dy/dx = -x"
DEFAULT_X0 = 0.0
DEFAULT_Y0 = 1.0
DEFAULT_X_END = 1.0
DEFAULT_SOLVER_STEP = 0.1
PREVIEW_POINTS = 20

PALETTE = [
    "#0D6EFD",  # blue
    "#DC3545",  # red
    "#198754",  # green
    "#FD7E14",  # orange
    "#6F42C1",  # purple
    "#20C997",  # teal
    "#D63384",  # pink
    "#6C757D",  # gray
]

EXAMPLE_EQUATIONS = [
    ("Linear decay", "dy/dx = -y"),
    ("Logistic growth", "dy/dx = y*(1 - y/4)"),
    ("Parabolas", "dy/dx = -x"),
    ("Gaussian growth", "dy/dx = x*y"),
    ("Homogeneous", "dy/dx = y/x"),
    ("Forced oscillation", "dy/dx = sin(x) - y"),
    ("Riccati", "dy/dx = x^2 + y^2"),
]


@dataclass(frozen=True)
class IntegrationConfig:
    """
    Domain bounds and step settings shared by every box-mode integration.

    Instances are immutable; use ``with_bounds`` / ``with_step`` to derive a
    modified copy.
    """

    x_min: float = DEFAULT_BOUNDS[0]
    x_max: float = DEFAULT_BOUNDS[1]
    y_min: float = DEFAULT_BOUNDS[2]
    y_max: float = DEFAULT_BOUNDS[3]
    h: float = DEFAULT_STEP
    max_steps: int = DEFAULT_MAX_STEPS

    def __post_init__(self):
        if not self.x_min < self.x_max:
            raise ValueError(f"Invalid x range: x_min ({self.x_min}) must be less than x_max ({self.x_max}).")
        if not self.y_min < self.y_max:
            raise ValueError(f"Invalid y range: y_min ({self.y_min}) must be less than y_max ({self.y_max}).")
        if not self.h > 0:
            raise ValueError(f"Step size must be positive, got {self.h}.")
        if int(self.max_steps) < 1:
            raise ValueError(f"max_steps must be at least 1, got {self.max_steps}.")

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.x_min, self.x_max, self.y_min, self.y_max)

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    def with_bounds(self, x_min, x_max, y_min, y_max) -> "IntegrationConfig":
        return replace(self, x_min=float(x_min), x_max=float(x_max),
                       y_min=float(y_min), y_max=float(y_max))

    def with_step(self, h=None, max_steps=None) -> "IntegrationConfig":
        return replace(
            self,
            h=self.h if h is None else float(h),
            max_steps=self.max_steps if max_steps is None else int(max_steps),
        )
