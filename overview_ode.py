import numpy as np
import streamlit as st

from ode_compiler import compile_equation
from ode_integrator import integrate_interval


def app():
    st.title("Overview of First-Order ODEs")

    st.markdown(
        "A **first-order ordinary differential equation** gives the slope of an unknown "
        "function y(x) at every point of the plane:"
    )
    st.latex(r"\frac{dy}{dx} = f(x, y)")
    st.markdown(
        "Together with an initial condition $y(x_0) = y_0$ this is an **initial value problem**. "
        "Every point of the plane carries a slope, and a solution is a curve that follows those slopes."
    )

    # ---------- Slope fields ----------
    st.subheader("Slope Fields")
    st.markdown(
        "Drawing a short segment of slope $f(x, y)$ at each point of a grid gives the "
        "**slope field**. Solution curves are tangent to the segments they cross."
    )
    st.latex(r"\frac{dy}{dx} = -x \quad\Rightarrow\quad y(x) = C - \frac{x^2}{2}")

    # ---------- RK4 ----------
    st.subheader("Classical Runge–Kutta (RK4)")
    st.markdown("From $(x_n, y_n)$ with step $h$:")
    st.latex(
        r"\begin{aligned}"
        r"k_1 &= h\,f(x_n, y_n) \\"
        r"k_2 &= h\,f(x_n + \tfrac{h}{2}, y_n + \tfrac{k_1}{2}) \\"
        r"k_3 &= h\,f(x_n + \tfrac{h}{2}, y_n + \tfrac{k_2}{2}) \\"
        r"k_4 &= h\,f(x_n + h, y_n + k_3) \\"
        r"y_{n+1} &= y_n + \tfrac{1}{6}(k_1 + 2k_2 + 2k_3 + k_4)"
        r"\end{aligned}"
    )

    with st.expander("Compare RK4 with the exact solution of $y'=-2y,\\;y(0)=1$"):
        h = st.select_slider("Step size h", options=[0.5, 0.25, 0.1, 0.05], value=0.25)
        f = compile_equation("dy/dx = -2*y")
        points = integrate_interval(f, 0.0, 1.0, 3.0, h)
        xs = np.array([p.x for p in points])
        st.line_chart(
            data={
                "x": xs,
                "RK4": [p.y for p in points],
                "exact e^{-2x}": np.exp(-2.0 * xs),
            },
            x="x",
        )

    # ---------- About ----------
    st.subheader("About This Tool")
    st.markdown(
        "This website allows users to:\n"
        "1. Enter an equation dy/dx = f(x, y),\n"
        "2. Integrate it from an initial point and read each step of the method,\n"
        "3. Explore the slope field and seed solution curves interactively."
    )
