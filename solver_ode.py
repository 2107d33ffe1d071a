import streamlit as st

from ode_config import (
    DEFAULT_EQUATION,
    DEFAULT_SOLVER_STEP,
    DEFAULT_X0,
    DEFAULT_X_END,
    DEFAULT_Y0,
    PREVIEW_POINTS,
)
from ode_integrator import reference_trajectory
from ode_plots import preview_table, trajectory_figure
from trajectory_session import TrajectorySession


def _session() -> TrajectorySession:
    if "trajectory_session" not in st.session_state:
        st.session_state["trajectory_session"] = TrajectorySession()
    return st.session_state["trajectory_session"]


def app():
    st.title("RK4 Solver")

    # CSS
    st.markdown("""
    <style>
    /* Primary button (Solve) */
    div.stButton > button:first-child {
        background-color: #0D6EFD;
        color: white;
        border: 2px solid #0D6EFD;
        border-radius: 8px;
        padding: 0.5em 1em;
        font-weight: 600;
    }
    div.stButton > button:first-child:hover {
        background-color: #E7F1FF;
        color: black;
        border-color: #E7F1FF;
    }
    .step-error { color: #DC3545; font-weight: 600; }
    </style>
    """, unsafe_allow_html=True)

    session = _session()

    # Input equation
    st.subheader("Equation")
    equation = st.text_input(
        "First-order ODE",
        value=DEFAULT_EQUATION,
        key="solver_equation",
        help="Write dy/dx = f(x, y) using x, y, + - * / ^ and sin, cos, tan, exp, log, sqrt, ...",
    )

    # Initial condition & domain
    st.subheader("Initial Condition and Domain")
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        x0 = st.number_input("x₀", value=DEFAULT_X0, format="%.4f", key="solver_x0")
    with c2:
        y0 = st.number_input("y₀ = y(x₀)", value=DEFAULT_Y0, format="%.4f", key="solver_y0")
    with c3:
        x_end = st.number_input("x end", value=DEFAULT_X_END, format="%.4f", key="solver_x_end")
    with c4:
        h = st.number_input("Step size h", value=DEFAULT_SOLVER_STEP, min_value=1e-6,
                            format="%.4f", key="solver_h")

    show_reference = st.checkbox(
        "Overlay a high-accuracy reference solution",
        value=False,
        help="Solves the same problem with SciPy's DOP853 at tight tolerances for comparison.",
    )

    btn_solve = st.button("Solve", use_container_width=True)

    if btn_solve:
        with st.spinner("Processing..."):
            result = session.solve(equation, x0, y0, x_end, h)
        if result is None:
            st.info("Enter an equation to solve.")

    result = session.result
    if result is None:
        return

    # Step-by-step panel
    st.subheader("Step by Step")
    for step in result.steps:
        if step.is_error:
            st.error(f"{step.description}: {step.result_text}")
        else:
            st.markdown(f"**{step.index}. {step.description}**")
            st.code(step.result_text, language=None)

    if not result.ok:
        return

    # Plot
    st.markdown("#### Solution Plot")
    reference = None
    if show_reference:
        try:
            reference = reference_trajectory(session.function, x0, y0, [p.x for p in result.trajectory])
        except Exception as e:
            st.warning(f"Reference solution unavailable: {e}")
    st.plotly_chart(trajectory_figure(result.trajectory, reference=reference), use_container_width=True)

    # Table
    st.markdown(f"#### First {min(PREVIEW_POINTS, len(result.trajectory))} points")
    st.dataframe(preview_table(result.trajectory, PREVIEW_POINTS))


if __name__ == "__main__":
    app()
