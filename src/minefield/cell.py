"""
Cell module for the minefield engine.

A cell holds both views of one grid position: the hidden answer
(mine or neighbor count) and the player-visible state
(unopened, flagged or revealed).
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

# Integer codes shared by the answer and player grids.
# 0-8 are neighbor mine counts.
MINE = 9
UNOPENED = 10
FLAGGED = 11


class CellState(Enum):
    """Player-visible state of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single position on the board.

    Attributes:
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighboring cells (0-8).
        state: Player-visible state (hidden, revealed, or flagged).
    """

    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if cell was revealed, False if already revealed or flagged.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    @property
    def is_hidden(self) -> bool:
        """Check if cell is unopened and unflagged."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_covered(self) -> bool:
        """Check if cell is still unopened, flagged or not."""
        return self.state != CellState.REVEALED

    def answer_code(self) -> int:
        """Integer code of the hidden answer: MINE or the neighbor count."""
        if self.is_mine:
            return MINE
        return self.adjacent_mines

    def to_code(self) -> int:
        """
        Convert cell to its player grid code.

        Returns:
            UNOPENED (10): Hidden cell
            FLAGGED (11): Flagged cell
            0-8: Revealed cell with adjacent mine count
            MINE (9): Revealed mine (lost game)
        """
        if self.state == CellState.HIDDEN:
            return UNOPENED
        if self.state == CellState.FLAGGED:
            return FLAGGED
        return self.answer_code()
