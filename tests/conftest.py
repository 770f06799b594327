import numpy as np
import pytest

from life import Grid


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def empty_grid():
    """Build an all-dead grid of the given size."""
    def make(cols, rows):
        grid = Grid()
        grid.resize(cols, rows, randomize=False)
        return grid
    return make


def live_cells(grid):
    """Set of (col, row) for every live cell."""
    rows, cols = np.nonzero(grid.current)
    return set(zip(cols.tolist(), rows.tolist()))
