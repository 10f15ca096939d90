import os
import sys

# Ensure the repo root is on sys.path when running without an editable install
repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)
tests_dir = os.path.dirname(os.path.abspath(__file__))
if tests_dir not in sys.path:
    sys.path.insert(0, tests_dir)

import pytest

from gravitation.simulation import SimulationController
from gravitation.versioning import VersionManager
from lightcone.frames import FrameDiagram
from lightcone.viewport import SpacetimeView


@pytest.fixture
def sim():
    return SimulationController()


@pytest.fixture
def versions():
    return VersionManager(spacing=32, canvas_width=800, canvas_height=800, max_versions=50)


@pytest.fixture
def diagram():
    return FrameDiagram()


@pytest.fixture
def view():
    """1100 x 800 view: the origin event is drawn at (550, 750)."""
    return SpacetimeView(1100, 800)


def run_for(sim, seconds, dt=0.1):
    """Tick the simulation in fixed steps."""
    for _ in range(int(round(seconds / dt))):
        sim.tick(dt)
