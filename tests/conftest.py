# tests/conftest.py
import pytest

from ode_compiler import compile_equation
from ode_config import IntegrationConfig
from field_session import FieldSession


@pytest.fixture
def box_config():
    """Rectangle and step settings of the x*y growth scenario."""
    return IntegrationConfig(-4.0, 4.0, -3.0, 3.0, h=0.05, max_steps=200)


@pytest.fixture
def growth_function():
    return compile_equation("dy/dx = x*y")


@pytest.fixture
def field_session(box_config):
    session = FieldSession(config=box_config)
    session.set_equation("dy/dx = x*y")
    return session
