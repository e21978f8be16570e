# tests/conftest.py
import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from pathvis.core.types import create_grid, toggle_obstacle


@pytest.fixture
def open_grid():
    return create_grid(3, 3, (0, 0), (2, 2))


@pytest.fixture
def walled_grid():
    grid = create_grid(3, 3, (0, 0), (2, 2))
    for coord in [(0, 1), (1, 1), (2, 1)]:
        toggle_obstacle(grid, coord)
    return grid
