"""
Board module for the minefield engine.

Implements the game board: random mine layout, flag toggling,
cascading opens, chording, move accounting and win/loss detection.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from .cell import Cell, CellState


logger = logging.getLogger(__name__)

Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


class Difficulty(Enum):
    """Named board presets."""

    EASY = auto()
    NORMAL = auto()
    HARD = auto()


class OutOfRangeError(IndexError):
    """Raised when a coordinate lies outside the board."""


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a minefield board.

    Attributes:
        height: Number of rows.
        width: Number of columns.
        num_mines: Total mines to place.
    """

    height: int = 9
    width: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        problem = self._find_problem(self.height, self.width, self.num_mines)
        if problem is not None:
            raise ValueError(problem)

    @staticmethod
    def _find_problem(height: int, width: int, num_mines: int) -> Optional[str]:
        """Describe what is wrong with the given values, or None."""
        if height < 1 or width < 1:
            return "Board dimensions must be positive"
        if num_mines < 1:
            return "Number of mines must be positive"
        max_mines = height * width - 1
        if num_mines > max_mines:
            return f"Too many mines (max {max_mines})"
        return None

    @classmethod
    def resolve(cls, height: int, width: int, num_mines: int) -> "BoardConfig":
        """
        Build a configuration, falling back to the easy preset.

        Invalid values never raise here: a zero dimension, zero mines
        or a board with no safe cell silently yields EASY.
        """
        problem = cls._find_problem(height, width, num_mines)
        if problem is not None:
            logger.debug(
                "Invalid board %dx%d with %d mines (%s), using easy preset",
                height, width, num_mines, problem,
            )
            return EASY
        return cls(height, width, num_mines)

    @classmethod
    def for_difficulty(cls, difficulty: Difficulty) -> "BoardConfig":
        """Get the preset configuration for a difficulty."""
        return PRESETS[difficulty]

    @property
    def total_cells(self) -> int:
        """Number of cells on the board."""
        return self.height * self.width


# Preset difficulty levels
EASY = BoardConfig(9, 9, 10)
NORMAL = BoardConfig(16, 16, 40)
HARD = BoardConfig(16, 30, 99)

PRESETS = {
    Difficulty.EASY: EASY,
    Difficulty.NORMAL: NORMAL,
    Difficulty.HARD: HARD,
}


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Owns the mine layout and the player's view of it. The layout is
    generated once at construction and never changes; only cell
    states, counters and the game state are mutated by actions.

    Args:
        config: Difficulty preset or explicit configuration.
        rng: Random source providing ``permutation(n)``, e.g. a numpy
            ``Generator``. Takes precedence over ``seed``.
        seed: Seed for a fresh ``numpy.random.default_rng``.
        mine_positions: Explicit mine layout; skips random placement.
    """

    config: Union[BoardConfig, Difficulty] = Difficulty.EASY
    rng: Optional[Any] = field(default=None, repr=False, compare=False)
    seed: Optional[int] = field(default=None, repr=False)
    mine_positions: Optional[Sequence[Position]] = field(
        default=None, repr=False
    )
    _grid: List[List[Cell]] = field(init=False, repr=False)
    _game_state: GameState = field(init=False, default=GameState.PLAYING)
    _moves: int = field(init=False, default=0)
    _flags_placed: int = field(init=False, default=0)
    _wrong_flags: List[Position] = field(init=False, default_factory=list)
    _cells_revealed: int = field(init=False, default=0)
    _exploded: Optional[Position] = field(init=False, default=None)

    def __post_init__(self) -> None:
        """Build the grid and lay the mines."""
        if isinstance(self.config, Difficulty):
            self.config = BoardConfig.for_difficulty(self.config)
        self._init_grid()
        if self.mine_positions is None:
            positions = self._choose_mine_positions()
        else:
            positions = self._check_mine_positions(self.mine_positions)
        self._place_mines(positions)
        logger.debug(
            "Created %dx%d board with %d mines",
            self.config.height, self.config.width, self.config.num_mines,
        )

    @classmethod
    def from_dimensions(
        cls,
        height: int,
        width: int,
        num_mines: int,
        rng: Optional[Any] = None,
        seed: Optional[int] = None,
    ) -> "Board":
        """
        Create a custom board, using the easy preset for invalid values.

        Args:
            height: Number of rows.
            width: Number of columns.
            num_mines: Number of mines, below height * width.
            rng: Optional random source.
            seed: Optional seed when no rng is given.

        Returns:
            New board.
        """
        config = BoardConfig.resolve(height, width, num_mines)
        return cls(config, rng=rng, seed=seed)

    @classmethod
    def with_mines(
        cls, height: int, width: int, mines: Sequence[Position]
    ) -> "Board":
        """
        Create a board with a fixed mine layout.

        Raises:
            ValueError: If the layout does not fit the board.
        """
        config = BoardConfig(height, width, len(mines))
        return cls(config, mine_positions=mines)

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create grid of hidden, mine-free cells."""
        self._grid = [
            [Cell() for _ in range(self.config.width)]
            for _ in range(self.config.height)
        ]

    def _choose_mine_positions(self) -> List[Position]:
        """Take the first num_mines cells of a uniform random permutation."""
        rng = self.rng
        if rng is None:
            rng = np.random.default_rng(self.seed)
        order = rng.permutation(self.config.total_cells)
        width = self.config.width
        return [
            (int(index) // width, int(index) % width)
            for index in order[:self.config.num_mines]
        ]

    def _check_mine_positions(
        self, mines: Sequence[Position]
    ) -> List[Position]:
        """Validate an explicit mine layout."""
        positions = [(int(row), int(col)) for row, col in mines]
        if len(positions) != self.config.num_mines:
            raise ValueError(
                f"Expected {self.config.num_mines} mines, got {len(positions)}"
            )
        for row, col in positions:
            if not self._is_valid_position(row, col):
                raise ValueError(f"Mine ({row}, {col}) is outside the board")
        if len(set(positions)) != len(positions):
            raise ValueError("Duplicate mine positions")
        return positions

    def _place_mines(self, positions: Sequence[Position]) -> None:
        """
        Lay mines and accumulate neighbor counts.

        Every mine bumps the count of each of its neighbors; mines are
        marked afterwards so a mine cell never keeps a count.
        """
        for row, col in positions:
            for neighbor_row, neighbor_col in self._get_neighbors(row, col):
                self._grid[neighbor_row][neighbor_col].adjacent_mines += 1
        for row, col in positions:
            cell = self._grid[row][col]
            cell.is_mine = True
            cell.adjacent_mines = 0

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, row: int, col: int) -> List[Position]:
        """Neighbors of an in-bounds cell, in row-major order."""
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self._is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def _is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.config.height and 0 <= col < self.config.width

    def _check_position(self, row: int, col: int) -> None:
        """Raise OutOfRangeError for coordinates off the board."""
        if not self._is_valid_position(row, col):
            raise OutOfRangeError(
                f"Cell ({row}, {col}) is outside the "
                f"{self.config.height}x{self.config.width} board"
            )

    def get_neighbors(self, row: int, col: int) -> List[Position]:
        """
        Get the up to 8 cells surrounding a position.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples, clipped to the board.

        Raises:
            OutOfRangeError: If the center is off the board.
        """
        self._check_position(row, col)
        return self._get_neighbors(row, col)

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def flag(self, row: int, col: int) -> bool:
        """
        Toggle flag on an unopened cell.

        Counts as a move. Opened cells are left alone, as is the whole
        board once the game is over.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            True if the flag was toggled, False otherwise.

        Raises:
            OutOfRangeError: If the position is off the board.
        """
        self._check_position(row, col)
        if self._game_state != GameState.PLAYING:
            return False

        cell = self._grid[row][col]
        if not cell.toggle_flag():
            return False

        self._moves += 1
        if cell.is_flagged:
            self._flags_placed += 1
            if not cell.is_mine:
                self._wrong_flags.append((row, col))
        else:
            self._flags_placed -= 1
            if (row, col) in self._wrong_flags:
                self._wrong_flags.remove((row, col))
        return True

    def open(self, row: int, col: int) -> GameState:
        """
        Open a cell as a player move.

        An unopened cell is revealed, cascading through zero-count
        regions; a mine loses the game and uncovers the whole layout.
        An opened number chords: if exactly that many neighbors are
        flagged, every unopened neighbor is opened. Opening a flagged
        cell, or chording with nothing left to open, is not counted
        as a move.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            Game state after the move.

        Raises:
            OutOfRangeError: If the position is off the board.
        """
        self._check_position(row, col)
        if self._game_state != GameState.PLAYING:
            return self._game_state

        self._moves += 1
        cell = self._grid[row][col]
        if cell.is_hidden:
            self._reveal_from(row, col)
        elif cell.is_flagged:
            self._moves -= 1
        else:
            self._chord(row, col)

        if self._game_state == GameState.PLAYING:
            self._check_win_condition()
        return self._game_state

    def _reveal_from(self, row: int, col: int) -> None:
        """
        Reveal a hidden cell and cascade from zero-count cells.

        Cells are revealed before being queued, so each one is
        processed at most once.
        """
        cell = self._grid[row][col]
        cell.reveal()
        self._cells_revealed += 1

        if cell.is_mine:
            self._explode(row, col)
            return

        pending = [(row, col)] if cell.adjacent_mines == 0 else []
        while pending:
            current_row, current_col = pending.pop()
            for neighbor_row, neighbor_col in self._get_neighbors(
                current_row, current_col
            ):
                neighbor = self._grid[neighbor_row][neighbor_col]
                if not neighbor.reveal():
                    continue
                self._cells_revealed += 1
                if neighbor.adjacent_mines == 0:
                    pending.append((neighbor_row, neighbor_col))

    def _chord(self, row: int, col: int) -> None:
        """Open unopened neighbors if the flag count matches the number."""
        cell = self._grid[row][col]
        neighbors = self._get_neighbors(row, col)
        if self._count_adjacent_flags(neighbors) != cell.adjacent_mines:
            return

        opened = 0
        for neighbor_row, neighbor_col in neighbors:
            if self._game_state != GameState.PLAYING:
                break
            if self._grid[neighbor_row][neighbor_col].is_hidden:
                self._reveal_from(neighbor_row, neighbor_col)
                opened += 1

        if opened == 0:
            self._moves -= 1

    def _count_adjacent_flags(self, neighbors: Sequence[Position]) -> int:
        """Count flagged cells among the given positions."""
        count = 0
        for neighbor_row, neighbor_col in neighbors:
            if self._grid[neighbor_row][neighbor_col].is_flagged:
                count += 1
        return count

    def can_chord(self, row: int, col: int) -> bool:
        """
        Check if opening a revealed number would open any neighbor.

        True when the game is on, the cell is revealed, its flagged
        neighbors match its number and at least one neighbor is hidden.

        Raises:
            OutOfRangeError: If the position is off the board.
        """
        self._check_position(row, col)
        cell = self._grid[row][col]
        if self._game_state != GameState.PLAYING or not cell.is_revealed:
            return False
        neighbors = self._get_neighbors(row, col)
        if self._count_adjacent_flags(neighbors) != cell.adjacent_mines:
            return False
        return any(self._grid[r][c].is_hidden for r, c in neighbors)

    def _explode(self, row: int, col: int) -> None:
        """Lose the game and uncover every cell."""
        for grid_row in self._grid:
            for cell in grid_row:
                cell.state = CellState.REVEALED
        self._cells_revealed = self.config.total_cells
        self._exploded = (row, col)
        self._game_state = GameState.LOST
        logger.info(
            "Mine opened at (%d, %d) after %d moves", row, col, self._moves
        )

    def _check_win_condition(self) -> None:
        """Win once the only covered cells left are as many as the mines."""
        covered = self.config.total_cells - self._cells_revealed
        if covered == self.config.num_mines:
            self._game_state = GameState.WON
            logger.info("Board cleared in %d moves", self._moves)

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def height(self) -> int:
        """Number of rows."""
        return self.config.height

    @property
    def width(self) -> int:
        """Number of columns."""
        return self.config.width

    @property
    def num_mines(self) -> int:
        """Number of mines on the board."""
        return self.config.num_mines

    @property
    def moves(self) -> int:
        """Number of counted player moves."""
        return self._moves

    @property
    def flags_placed(self) -> int:
        """Number of cells currently flagged."""
        return self._flags_placed

    @property
    def flags_remaining(self) -> int:
        """Mines not yet matched by a flag, never below zero."""
        return max(0, self.config.num_mines - self._flags_placed)

    @property
    def exploded_at(self) -> Optional[Position]:
        """Position of the opened mine after a loss."""
        return self._exploded

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._game_state == GameState.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._game_state == GameState.LOST

    def get_cell(self, row: int, col: int) -> Cell:
        """
        Get cell at position.

        Raises:
            OutOfRangeError: If the position is off the board.
        """
        self._check_position(row, col)
        return self._grid[row][col]

    def get_wrong_flags(self) -> List[Position]:
        """Flagged positions that hold no mine, in flagging order."""
        return list(self._wrong_flags)

    def get_player_grid(self) -> List[List[int]]:
        """
        Get the player's view as integer codes.

        Returns:
            Rows of codes: 0-8 opened count, 9 mine (after a loss),
            10 unopened, 11 flagged.
        """
        return [[cell.to_code() for cell in row] for row in self._grid]

    def get_answer_grid(self) -> List[List[int]]:
        """Get the hidden layout: 9 for mines, else the neighbor count."""
        return [[cell.answer_code() for cell in row] for row in self._grid]

    def get_observation(self) -> np.ndarray:
        """Get the player grid as an int8 numpy array."""
        return np.array(self.get_player_grid(), dtype=np.int8)

    def get_valid_actions(self) -> List[Position]:
        """
        Get list of cells that can still be opened.

        Returns:
            List of unopened, unflagged (row, col) positions.
        """
        actions = []
        for row in range(self.config.height):
            for col in range(self.config.width):
                if self._grid[row][col].is_hidden:
                    actions.append((row, col))
        return actions

    def __str__(self) -> str:
        """Player grid as text with column and row labels."""
        header = "    " + "".join(
            f"{col:<3}" for col in range(self.config.width)
        )
        lines = [header.rstrip(), ""]
        for row, codes in enumerate(self.get_player_grid()):
            line = f"{row:<4}" + "".join(f"{code:<3}" for code in codes)
            lines.append(line.rstrip())
        return "\n".join(lines)
