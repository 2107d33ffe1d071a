import logging

import streamlit as st

import home
import overview_ode
import slope_field
import solver_ode
from log_config import setup_logging


PAGES = {
    "Home": home.app,
    "Overview": overview_ode.app,
    "RK4 Solver": solver_ode.app,
    "Slope Field": slope_field.app,
}


def main():
    st.set_page_config(page_title="SlopeLab", layout="wide")

    if not st.session_state.get("_logging_ready"):
        setup_logging(logging.INFO)
        st.session_state["_logging_ready"] = True

    # Home page buttons request a route through this flag
    route = st.session_state.pop("_route_to", None)
    if route in PAGES:
        st.session_state["page"] = route

    st.sidebar.title("SlopeLab")
    page = st.sidebar.radio("Navigate", list(PAGES.keys()), key="page")
    PAGES[page]()


if __name__ == "__main__":
    main()
