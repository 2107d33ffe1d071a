import math
from typing import Iterable, List, Optional, Sequence, Tuple

import plotly.graph_objects as go

from ode_config import ARROW_FRACTION, PALETTE
from ode_models import FieldSample, SolutionCurve, trajectory_xy

# trace order of slope_field_figure: arrows, grid markers, then curves
GRID_TRACE = 1


def arrow_segments(samples: Iterable[FieldSample], length: float) -> Tuple[List, List]:
    """
    Line segments centred on each sample, direction ``atan(slope)``.

    Returns (xs, ys) with ``None`` separators, ready for a single Scatter trace.
    """
    xs, ys = [], []
    half = length / 2
    for s in samples:
        angle = math.atan(s.slope)
        dx, dy = half * math.cos(angle), half * math.sin(angle)
        xs += [s.x - dx, s.x + dx, None]
        ys += [s.y - dy, s.y + dy, None]
    return xs, ys


def _base_layout(fig, bounds=None, x_title="x", y_title="y"):
    fig.update_layout(
        xaxis_title=x_title,
        yaxis_title=y_title,
        template="plotly_white",
        margin=dict(l=40, r=20, t=60, b=40),
    )
    fig.update_xaxes(showgrid=True)
    fig.update_yaxes(showgrid=True)
    if bounds is not None:
        x_min, x_max, y_min, y_max = bounds
        fig.update_xaxes(range=[x_min, x_max])
        fig.update_yaxes(range=[y_min, y_max])
    return fig


def slope_field_figure(
    samples: Sequence[FieldSample],
    bounds: Sequence[float],
    curves: Sequence[SolutionCurve] = (),
    palette: Sequence[str] = PALETTE,
) -> go.Figure:
    x_min, x_max, y_min, y_max = bounds
    span = min(x_max - x_min, y_max - y_min)
    # arrows are drawn a little longer than ARROW_FRACTION of the span when the grid is coarse
    density = max(1, int(math.sqrt(len(samples)))) if samples else 1
    length = max(ARROW_FRACTION * span, 0.6 * span / density)

    ax, ay = arrow_segments(samples, length)
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=ax, y=ay,
            mode="lines",
            line=dict(color="rgba(100,100,100,0.7)", width=1),
            hoverinfo="skip",
            name="Slope field",
            showlegend=False,
        )
    )
    # invisible grid markers so a click on the field reports coordinates
    fig.add_trace(
        go.Scatter(
            x=[s.x for s in samples], y=[s.y for s in samples],
            mode="markers",
            marker=dict(size=8, opacity=0.0),
            customdata=[s.slope for s in samples],
            hovertemplate="x=%{x:.3g}<br>y=%{y:.3g}<br>slope=%{customdata:.3g}<extra></extra>",
            name="grid",
            showlegend=False,
        )
    )
    for curve in curves:
        xs, ys = trajectory_xy(curve.points)
        color = palette[curve.color_index % len(palette)]
        fig.add_trace(
            go.Scatter(
                x=xs, y=ys,
                mode="lines",
                line=dict(color=color, width=2.5),
                name=f"Curve {curve.id}",
                hovertemplate=f"x=%{{x}}<br>y=%{{y}}<extra>Curve {curve.id}</extra>",
            )
        )
        fig.add_trace(
            go.Scatter(
                x=[curve.seed.x], y=[curve.seed.y],
                mode="markers",
                marker=dict(color=color, size=8),
                showlegend=False,
                hoverinfo="skip",
            )
        )
    return _base_layout(fig, bounds)


def trajectory_figure(points, reference=None, label: str = "RK4") -> go.Figure:
    xs, ys = trajectory_xy(points)
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=xs, y=ys,
            mode="lines+markers",
            name=label,
            marker=dict(size=4),
            hovertemplate=f"x=%{{x}}<br>y=%{{y}}<extra>{label}</extra>",
        )
    )
    if reference:
        rx, ry = trajectory_xy(reference)
        fig.add_trace(
            go.Scatter(
                x=rx, y=ry,
                mode="lines",
                name="Reference (DOP853)",
                line=dict(dash="dash"),
            )
        )
    fig.update_layout(legend_title_text="Solution")
    return _base_layout(fig)


def preview_table(points, limit: Optional[int] = 20):
    """First ``limit`` points as a column dict for ``st.dataframe``."""
    shown = points if limit is None else points[:limit]
    xs, ys = trajectory_xy(shown)
    return {"x": xs, "y": ys}


def grid_pick(points) -> Optional[Tuple[float, float]]:
    """
    Seed coordinates from a plotly selection, or None.

    Only points on the grid-marker trace count; picks on arrows or curves are ignored.
    """
    for p in points or []:
        if p.get("curve_number") == GRID_TRACE and p.get("x") is not None and p.get("y") is not None:
            return float(p["x"]), float(p["y"])
    return None
