"""
Minefield game engine.

Provides the Minesweeper rule engine: board generation, flagging,
cascading opens, move accounting and win/loss detection.
"""
from .cell import Cell, CellState, MINE, UNOPENED, FLAGGED
from .board import (
    Board,
    BoardConfig,
    Difficulty,
    GameState,
    OutOfRangeError,
    EASY,
    NORMAL,
    HARD,
)
from .environment import MinesweeperEnv

__all__ = [
    "Cell",
    "CellState",
    "MINE",
    "UNOPENED",
    "FLAGGED",
    "Board",
    "BoardConfig",
    "Difficulty",
    "GameState",
    "OutOfRangeError",
    "EASY",
    "NORMAL",
    "HARD",
    "MinesweeperEnv",
]
