# tests/conftest.py
import pytest
from dimensia.units.registry import DEFAULT_REGISTRY as _ureg
from dimensia.units.registry import UnitsRegistry


@pytest.fixture(scope="session")
def ureg():
    return _ureg


@pytest.fixture
def reg():
    """Fresh, unfrozen registry with nothing declared."""
    return UnitsRegistry()
