"""
Gymnasium environment wrapper for the minefield engine.

Exposes a Board through the standard reset/step interface.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig, Difficulty, GameState
from .cell import FLAGGED


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D int8 array of player grid codes:
        - 0-8 = opened cell with adjacent mine count
        - 9 = mine (only after a loss)
        - 10 = unopened cell
        - 11 = flagged cell

    Actions:
        Discrete action space of size 2 * width * height.
        Action i < width * height opens cell (i // width, i % width);
        the second half toggles the flag on the same cells.

    Rewards:
        - +1 for an open that reveals cells
        - 0 for toggling a flag
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for an action that changed nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Union[BoardConfig, Difficulty, None] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration or difficulty (default: easy).
            render_mode: How to render the environment.
        """
        super().__init__()

        if config is None:
            config = Difficulty.EASY
        if isinstance(config, Difficulty):
            config = BoardConfig.for_difficulty(config)
        self.config = config
        self.render_mode = render_mode
        self._cells = self.config.height * self.config.width

        self.observation_space = spaces.Box(
            low=0,
            high=FLAGGED,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        # Open or flag, one action per cell each
        self.action_space = spaces.Discrete(2 * self._cells)

        self.board = Board(self.config, rng=self.np_random)
        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game on a freshly generated board.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.board = Board(self.config, rng=self.np_random)
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Open (i) or flag (cells + i) of cell i.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).

        Raises:
            ValueError: If the action is not in the action space.
        """
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action!r}")

        self._steps += 1
        if action < self._cells:
            reward = self._open(*self._action_to_position(action))
        else:
            reward = self._flag(*self._action_to_position(action - self._cells))

        observation = self.board.get_observation()
        terminated = not self.board.is_playing
        truncated = False

        if self.render_mode == "human":
            self.render()

        return observation, reward, terminated, truncated, self._get_info()

    def _action_to_position(self, index: int) -> Tuple[int, int]:
        """Convert flat cell index to (row, col) position."""
        row = int(index) // self.config.width
        col = int(index) % self.config.width
        return row, col

    def _open(self, row: int, col: int) -> float:
        """Open a cell and score the result."""
        if not self.board.is_playing:
            return -0.1
        before = self.board.get_observation()
        state = self.board.open(row, col)

        if state == GameState.WON:
            return 10.0
        if state == GameState.LOST:
            return -10.0
        if np.array_equal(before, self.board.get_observation()):
            return -0.1
        return 1.0

    def _flag(self, row: int, col: int) -> float:
        """Toggle a flag and score the result."""
        if not self.board.flag(row, col):
            return -0.1
        return 0.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "moves": self.board.moves,
            "flags_remaining": self.board.flags_remaining,
            "wrong_flags": len(self.board.get_wrong_flags()),
            "game_state": self.board.game_state.name,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        symbols = {9: "*", 10: ".", 11: "F", 0: " "}
        lines = []
        for row in self.board.get_player_grid():
            lines.append(
                " ".join(symbols.get(code, str(code)) for code in row)
            )
        return "\n".join(lines)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that would change the board.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if not self.board.is_playing:
            return mask
        for row in range(self.config.height):
            for col in range(self.config.width):
                index = row * self.config.width + col
                cell = self.board.get_cell(row, col)
                mask[index] = cell.is_hidden or self.board.can_chord(row, col)
                mask[self._cells + index] = cell.is_covered
        return mask
