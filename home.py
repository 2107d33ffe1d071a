import streamlit as st

from ode_config import EXAMPLE_EQUATIONS


def method_card(title, tag, desc):
    with st.container():
        st.markdown(
            f"""
            <div class="method-card">
            <div class="method-title">{title}</div>
            <div class="method-tag">{tag}</div>
            <div class="method-desc">{desc}</div>
            </div>
            """,
            unsafe_allow_html=True
        )


def app():
    st.title("Home")

    st.write(
        "SlopeLab explores first-order ordinary differential equations **dy/dx = f(x, y)**. "
        "Integrate a single trajectory step by step with classical Runge–Kutta, or draw the "
        "slope field and seed as many solution curves as you like."
    )

    c1, c2 = st.columns(2)
    with c1:
        if st.button("Go to RK4 Solver", use_container_width=True):
            # routing flag only; widget keys are left alone
            st.session_state["_route_to"] = "RK4 Solver"
            st.rerun()
    with c2:
        if st.button("Go to Slope Field", use_container_width=True):
            st.session_state["_route_to"] = "Slope Field"
            st.rerun()

    st.divider()

    st.markdown(
        """
        <style>
        .method-card{
            border:1px solid rgba(200,200,200,0.5);
            border-radius:14px;
            padding:14px 14px;
            height:100%;
            display:flex;
            flex-direction:column;
            gap:6px;
        }
        .method-title{ font-weight:700; font-size:1.05rem; line-height:1.2; margin:0; }
        .method-tag{
            display:inline-block;
            padding:2px 8px;
            border-radius:999px;
            background:#F1F5F9;
            font-size:0.8rem;
            line-height:1.2;
        }
        .method-desc{ font-size:0.95rem; line-height:1.45; margin:0; }
        </style>
        """,
        unsafe_allow_html=True
    )

    st.subheader("How It Works")
    st.caption("Everything runs with a fixed step so the numbers are reproducible.")

    c1, c2, c3 = st.columns(3)
    with c1:
        method_card(
            "RK4 (classical Runge–Kutta)",
            "Fixed step • 4th order",
            "Four slope evaluations per step. Local error shrinks like h⁵, global error like h⁴."
        )
    with c2:
        method_card(
            "Slope field",
            "Grid sampling",
            "The slope f(x, y) is sampled on an even grid and drawn as short segments of angle atan(f)."
        )
    with c3:
        method_card(
            "Solution curves",
            "Forward + backward",
            "Each seed is integrated in both directions until the curve leaves the view or the step budget runs out."
        )

    st.subheader("Try These")
    for name, eq in EXAMPLE_EQUATIONS:
        st.markdown(f"- **{name}**: `{eq}`")

    # Footer
    st.divider()
    f1, f2 = st.columns([1, 1])
    with f1:
        st.markdown("<div style='text-align: left;'><b>Version:</b> 0.1.0</div>", unsafe_allow_html=True)
    with f2:
        st.markdown(
            "<div style='text-align: right; color: gray; font-size: 0.9em;'>SlopeLab</div>",
            unsafe_allow_html=True
        )
