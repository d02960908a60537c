import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import
from tests.util.containers import (  # noqa: E402
    ALL_STRUCTURES,
    ORDERED_STRUCTURES,
    make_container,
)


@pytest.fixture(name="structure", params=ALL_STRUCTURES)
def _structure_fixture(request: pytest.FixtureRequest) -> str:
    return request.param


@pytest.fixture(name="container")
def _container_fixture(structure: str):
    """A fresh instance of each container type in turn."""

    return make_container(structure)


@pytest.fixture(name="ordered_container", params=ORDERED_STRUCTURES)
def _ordered_container_fixture(request: pytest.FixtureRequest):
    return make_container(request.param)
