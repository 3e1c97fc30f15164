"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path

import numpy as np

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Board, BoardConfig, Cell, Difficulty


class OrderedRng:
    """Random source whose permutation is the identity, or its reverse."""

    def __init__(self, reverse: bool = False) -> None:
        self.reverse = reverse

    def permutation(self, n: int) -> np.ndarray:
        order = np.arange(n)
        return order[::-1] if self.reverse else order


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board(seed=1234)


@pytest.fixture
def small_board() -> Board:
    """
    3x3 board with its only mine in the top-left corner.

        9 1 0
        1 1 0
        0 0 0
    """
    return Board.with_mines(3, 3, [(0, 0)])


@pytest.fixture
def wall_board() -> Board:
    """
    5x5 board whose middle row is all mines.

        0 0 0 0 0
        2 3 3 3 2
        9 9 9 9 9
        2 3 3 3 2
        0 0 0 0 0
    """
    return Board.with_mines(5, 5, [(2, col) for col in range(5)])


@pytest.fixture
def ordered_rng() -> OrderedRng:
    """Random source placing mines on the first cells in row-major order."""
    return OrderedRng()


@pytest.fixture
def reversed_rng() -> OrderedRng:
    """Random source placing mines on the last cells in row-major order."""
    return OrderedRng(reverse=True)


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)


@pytest.fixture
def tiny_config() -> BoardConfig:
    """3x3 configuration with a single mine."""
    return BoardConfig(3, 3, 1)


@pytest.fixture(params=list(Difficulty))
def difficulty(request) -> Difficulty:
    """Each named difficulty."""
    return request.param
