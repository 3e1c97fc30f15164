"""
Unit tests for the Gymnasium environment wrapper.
"""
import pytest
import numpy as np
from minefield import (
    Board,
    BoardConfig,
    Difficulty,
    MinesweeperEnv,
    UNOPENED,
    FLAGGED,
)


@pytest.fixture
def env(tiny_config: BoardConfig) -> MinesweeperEnv:
    """3x3 environment with the mine pinned to the top-left corner."""
    environment = MinesweeperEnv(config=tiny_config, render_mode="ansi")
    environment.reset(seed=0)
    environment.board = Board.with_mines(3, 3, [(0, 0)])
    return environment


# ============================================================================
# Reset Tests
# ============================================================================

class TestReset:
    """Test environment reset."""

    def test_reset_returns_unopened_observation(self) -> None:
        """A fresh episode shows only unopened cells."""
        environment = MinesweeperEnv()
        obs, info = environment.reset(seed=1)
        assert obs.shape == (9, 9)
        assert obs.dtype == np.int8
        assert np.all(obs == UNOPENED)
        assert info["game_state"] == "PLAYING"
        assert info["flags_remaining"] == 10

    def test_reset_seed_is_reproducible(self) -> None:
        """Same seed, same layout."""
        first = MinesweeperEnv()
        second = MinesweeperEnv()
        first.reset(seed=7)
        second.reset(seed=7)
        assert first.board.get_answer_grid() == second.board.get_answer_grid()

    def test_observation_in_space(self) -> None:
        """Observations belong to the declared observation space."""
        environment = MinesweeperEnv()
        obs, _ = environment.reset(seed=2)
        assert environment.observation_space.contains(obs)

    def test_action_space_covers_open_and_flag(self) -> None:
        """One open and one flag action per cell."""
        environment = MinesweeperEnv(config=BoardConfig(4, 5, 3))
        assert environment.action_space.n == 40

    def test_difficulty_config(self) -> None:
        """A difficulty preset can stand in for a configuration."""
        environment = MinesweeperEnv(config=Difficulty.HARD)
        obs, _ = environment.reset(seed=4)
        assert obs.shape == (16, 30)
        assert environment.board.num_mines == 99
        assert environment.action_space.n == 2 * 16 * 30


# ============================================================================
# Step Tests
# ============================================================================

class TestStep:
    """Test stepping through a game."""

    def test_open_far_corner_wins(self, env: MinesweeperEnv) -> None:
        """Cascading open of the safe region wins the game."""
        obs, reward, terminated, truncated, info = env.step(8)
        assert reward == 10.0
        assert terminated is True
        assert truncated is False
        assert info["game_state"] == "WON"

    def test_open_mine_loses(self, env: MinesweeperEnv) -> None:
        """Hitting the mine ends the episode."""
        _, reward, terminated, _, info = env.step(0)
        assert reward == -10.0
        assert terminated is True
        assert info["game_state"] == "LOST"

    def test_open_safe_number(self, env: MinesweeperEnv) -> None:
        """Revealing a number is rewarded and continues the game."""
        obs, reward, terminated, _, info = env.step(4)
        assert reward == 1.0
        assert terminated is False
        assert obs[1, 1] == 1
        assert info["moves"] == 1

    def test_flag_action(self, env: MinesweeperEnv) -> None:
        """Second half of the action space toggles flags."""
        obs, reward, _, _, info = env.step(9 + 4)
        assert reward == 0.0
        assert obs[1, 1] == FLAGGED
        assert info["wrong_flags"] == 1

    def test_noop_actions_are_penalized(self, env: MinesweeperEnv) -> None:
        """Actions that change nothing cost a little."""
        env.step(4)
        _, flag_reward, _, _, _ = env.step(9 + 4)
        _, open_reward, _, _, _ = env.step(4)
        assert flag_reward == -0.1
        assert open_reward == -0.1

    def test_invalid_action_raises(self, env: MinesweeperEnv) -> None:
        """Actions outside the space are rejected."""
        with pytest.raises(ValueError):
            env.step(18)


# ============================================================================
# Mask and Render Tests
# ============================================================================

class TestMaskAndRender:
    """Test action masks and text rendering."""

    def test_action_mask_tracks_cells(self, env: MinesweeperEnv) -> None:
        """Opened cells lose both actions, flagged cells keep the flag one."""
        env.step(4)
        env.step(9 + 0)
        env.step(9 + 1)
        mask = env.get_action_mask()
        assert mask.shape == (18,)
        assert not mask[4] and not mask[9 + 4]
        assert not mask[0] and mask[9 + 0]
        assert mask[8] and mask[9 + 8]

    def test_action_mask_empty_after_game(self, env: MinesweeperEnv) -> None:
        """Nothing is valid once the game is over."""
        env.step(0)
        assert not env.get_action_mask().any()

    def test_action_mask_offers_matching_chord(
        self, env: MinesweeperEnv
    ) -> None:
        """A revealed number with its flags placed can be opened again."""
        env.step(4)
        assert not env.get_action_mask()[4]
        env.step(9 + 0)
        assert env.get_action_mask()[4]

        _, reward, terminated, _, _ = env.step(4)

        assert reward == 10.0
        assert terminated is True

    def test_render_ansi(self, env: MinesweeperEnv) -> None:
        """ANSI render uses symbols for covered cells."""
        env.step(9 + 0)
        env.step(4)
        assert env.render() == "F . .\n. 1 .\n. . ."
