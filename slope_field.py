import streamlit as st

from field_session import FieldSession
from ode_config import (
    DEFAULT_BOUNDS,
    DEFAULT_GRID_DENSITY,
    DEFAULT_MAX_STEPS,
    DEFAULT_STEP,
    EXAMPLE_EQUATIONS,
    PALETTE,
    IntegrationConfig,
)
from ode_plots import grid_pick, slope_field_figure


def _session() -> FieldSession:
    if "field_session" not in st.session_state:
        st.session_state["field_session"] = FieldSession()
    return st.session_state["field_session"]


def _apply_preset():
    label = st.session_state.get("field_preset")
    for name, eq in EXAMPLE_EQUATIONS:
        if name == label:
            st.session_state["field_equation"] = eq


def _color_chip(color: str) -> str:
    return f"<span style='display:inline-block;width:12px;height:12px;border-radius:3px;background:{color};'></span>"


def app():
    st.title("Slope Field Explorer")
    session = _session()

    # Sidebar: settings
    st.sidebar.subheader("Field settings")
    x_min = st.sidebar.number_input("x min", value=DEFAULT_BOUNDS[0], key="field_x_min")
    x_max = st.sidebar.number_input("x max", value=DEFAULT_BOUNDS[1], key="field_x_max")
    y_min = st.sidebar.number_input("y min", value=DEFAULT_BOUNDS[2], key="field_y_min")
    y_max = st.sidebar.number_input("y max", value=DEFAULT_BOUNDS[3], key="field_y_max")
    h = st.sidebar.number_input("Step size h", value=DEFAULT_STEP, min_value=1e-4, format="%.4f", key="field_h")
    max_steps = st.sidebar.number_input("Max steps per direction", min_value=1, max_value=20000,
                                        value=DEFAULT_MAX_STEPS, step=50, key="field_max_steps")
    grid_density = st.sidebar.slider("Grid density", 5, 40, DEFAULT_GRID_DENSITY, key="field_grid")

    try:
        config = IntegrationConfig(x_min, x_max, y_min, y_max, h=h, max_steps=int(max_steps))
    except ValueError as e:
        st.error(str(e))
        st.stop()
    # stored curves are not recomputed on a bounds change
    session.set_config(config)

    # Equation
    st.selectbox(
        "Examples",
        options=[name for name, _ in EXAMPLE_EQUATIONS],
        index=None,
        placeholder="Pick an example equation",
        key="field_preset",
        on_change=_apply_preset,
    )
    if "field_equation" not in st.session_state:
        st.session_state["field_equation"] = EXAMPLE_EQUATIONS[0][1]
    equation = st.text_input("dy/dx = f(x, y)", key="field_equation")

    if session.function is None or equation != session.equation:
        session.set_equation(equation)
    if session.compile_error:
        st.warning(f"{session.compile_error}. Showing a flat field until the equation is fixed.")

    # Seed a curve
    st.subheader("Add a Solution Curve")
    c1, c2, c3 = st.columns([1, 1, 1])
    with c1:
        seed_x = st.number_input("x₀", value=0.0, key="field_seed_x")
    with c2:
        seed_y = st.number_input("y₀", value=1.0, key="field_seed_y")
    with c3:
        st.markdown("<div style='height:1.75rem'></div>", unsafe_allow_html=True)
        if st.button("Add curve", use_container_width=True):
            session.add_curve_at(seed_x, seed_y)

    # Plot
    samples = list(session.sample_field(config.bounds, grid_density))
    fig = slope_field_figure(samples, config.bounds, session.curves)
    # a new key drops the persisted selection once a pick is consumed
    chart_rev = st.session_state.setdefault("_chart_rev", 0)
    event = st.plotly_chart(
        fig,
        use_container_width=True,
        on_select="rerun",
        selection_mode="points",
        key=f"field_chart_{chart_rev}",
    )
    st.caption("Click a grid point to seed a curve through it.")

    picked = grid_pick(event.selection.points if event and event.selection else None)
    if picked is not None:
        st.session_state["_chart_rev"] = chart_rev + 1
        session.add_curve_at(*picked)
        st.rerun()

    # Curve list
    st.subheader("Curves")
    if not session.curves:
        st.caption("No curves yet.")
    for summary in session.curve_summaries():
        color = PALETTE[summary["color_index"] % len(PALETTE)]
        col_a, col_b = st.columns([4, 1])
        with col_a:
            st.markdown(
                f"{_color_chip(color)} &nbsp; **Curve {summary['id']}** "
                f"through ({summary['seed'].x:.3g}, {summary['seed'].y:.3g}), {summary['points']} points",
                unsafe_allow_html=True,
            )
        with col_b:
            if st.button("Remove", key=f"remove_curve_{summary['id']}"):
                session.remove_curve(summary["id"])
                st.rerun()

    if session.curves and st.button("Clear all curves"):
        session.clear_curves()
        st.rerun()


if __name__ == "__main__":
    app()
