"""
Tests for main.py - the tick-driven game loop and session runner.
"""

import json
import os
import random
import sys
from unittest.mock import Mock, patch

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig  # noqa: E402
from domain.constants import (  # noqa: E402
    DOWN, GAME_OVER, GAME_OVER_MESSAGE, LEFT, RESTART_HINT, RIGHT, RUNNING, UP,
)
from domain.game_state import GameState  # noqa: E402
from main import GameLoop, KEY_BINDINGS, run_session  # noqa: E402
from players import RandomPlayer, ScriptedPlayer  # noqa: E402
from services.render_sink import CanvasRenderSink  # noqa: E402
from services.sound_board import default_sound_board  # noqa: E402


def small_config(**overrides):
    settings = dict(
        min_x=1, max_x=10, min_y=1, max_y=10,
        start_x=5, start_y=5,
        food_count=0, obstacle_count=0,
        seed=1,
    )
    settings.update(overrides)
    return GameConfig(**settings)


def shape_snake(game, positions):
    """Rearrange the game's snake onto positions (head first)."""
    snake = game.snake
    snake._segments[0].move_to(positions[0])
    for position in positions[1:]:
        snake.grow().move_to(position)


class FakeTicker:
    """Delivers ticks back to back without waiting."""

    def __init__(self, fps, callback):
        self.fps = fps
        self.callback = callback
        self.ticks = 0
        self._running = False

    def start(self, max_ticks=None):
        self._running = True
        while self._running and (max_ticks is None or self.ticks < max_ticks):
            self.ticks += 1
            self.callback()
        self._running = False
        return self.ticks

    def stop(self):
        self._running = False


class TestGameLoopSetup:
    """Tests for the initial game state."""

    def test_reference_setup(self):
        """The default game spawns 50 food, 50 obstacles and the border."""
        game = GameLoop(GameConfig(seed=7))
        assert game.state == RUNNING
        assert game.snake.head == (25, 25)
        assert game.snake.length() == 1
        assert len(game.board.food) == 50
        assert len(game.board.obstacles) == 50
        assert len(game.board.border) == 2 * 58 + 2 * 43
        assert game.score == 10

    def test_setup_entities_do_not_overlap(self):
        """No two food, obstacle or snake cells coincide after setup."""
        game = GameLoop(GameConfig(seed=3))
        cells = (
            game.board.food_positions()
            + game.board.obstacle_positions()
            + game.snake.positions()
        )
        assert len(cells) == len(set(cells))

    def test_invalid_config_rejected(self):
        """A start position on the border is refused."""
        with pytest.raises(ValueError):
            GameLoop(small_config(start_x=1))

    def test_setup_records_history(self):
        """The initial state is recorded before any tick."""
        game = GameLoop(small_config())
        assert len(game.history) == 1
        assert game.history[0].tick_number == 0

    def test_score_shown_on_setup(self):
        """The text sink gets the score as soon as the game starts."""
        canvas = CanvasRenderSink()
        GameLoop(small_config(), render_sink=canvas)
        assert canvas.score_text == "Score: 10"


class TestGameLoopTick:
    """Tests for tick handling."""

    def test_tick_moves_snake(self):
        """One tick moves the head one cell in the current direction."""
        game = GameLoop(small_config())
        assert game.tick() == RUNNING
        assert game.snake.head == (4, 5)
        assert game.tick_number == 1

    def test_eating_food(self):
        """Eating grows the snake, replaces the food and plays 'collect'."""
        sounds = default_sound_board()
        game = GameLoop(small_config(), sound_board=sounds)
        game.board.spawn_food((4, 5))

        game.tick()

        assert game.state == RUNNING
        assert game.snake.length() == 2
        assert game.score == 20
        assert len(game.board.food) == 1
        assert not game.board.is_food_at((4, 5))
        assert sounds.get("collect").play_count == 1
        assert sounds.get("death").play_count == 0

    def test_respawned_food_is_free(self):
        """Replacement food never lands on the snake or an obstacle."""
        game = GameLoop(small_config())
        for x in range(2, 10):
            game.board.spawn_obstacle((x, 8))
        game.board.spawn_food((4, 5))
        game.tick()
        (food,) = game.board.food_positions()
        assert food not in game.snake.positions()
        assert food not in game.board.obstacle_positions()

    def test_boundary_death(self):
        """Reaching x=1 ends the game and plays 'death' exactly once."""
        sounds = default_sound_board()
        canvas = CanvasRenderSink()
        game = GameLoop(small_config(start_x=2), render_sink=canvas, sound_board=sounds)

        assert game.tick() == GAME_OVER
        assert game.snake.head == (1, 5)
        assert game.snake.alive is False
        assert game.snake.death_reason == "wall"
        assert sounds.get("death").play_count == 1
        assert canvas.banner == (GAME_OVER_MESSAGE, RESTART_HINT)

        game.tick()
        game.tick()
        assert sounds.get("death").play_count == 1
        assert game.snake.head == (1, 5)

    def test_obstacle_death(self):
        """Running into an interior obstacle ends the game."""
        game = GameLoop(small_config())
        game.board.spawn_obstacle((4, 5))
        game.tick()
        assert game.game_over
        assert game.snake.death_reason == "obstacle"

    def test_death_reason_comes_from_board_collision_check(self):
        """The loop asks the board whether the new head crashed."""
        game = GameLoop(small_config())
        with patch.object(game.board, "crashed_into_obstacle", return_value=True) as crashed:
            game.tick()
        crashed.assert_called_once_with(game.snake.head)
        assert game.game_over
        assert game.snake.death_reason == "obstacle"

    def test_loop_has_no_console_board_dump(self):
        """Board text dumps live on GameState, not on the loop."""
        game = GameLoop(small_config())
        assert not hasattr(game, "print_board")
        assert "H" in game.get_current_state().print_board()

    def test_self_collision_death(self):
        """Turning into the body ends the game."""
        game = GameLoop(small_config())
        shape_snake(game, [(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)])
        game.change_direction(DOWN)
        game.tick()
        assert game.game_over
        assert game.snake.death_reason == "self"

    def test_reversal_is_fatal(self):
        """Reversing a three-segment snake runs into its own body."""
        game = GameLoop(small_config())
        shape_snake(game, [(5, 5), (6, 5), (7, 5)])
        game.handle_key("right")
        game.tick()
        assert game.game_over
        assert game.snake.death_reason == "self"

    def test_food_check_wins_over_death(self):
        """Food under the new head is eaten even when the body also lands there."""
        game = GameLoop(small_config())
        game.board.spawn_food((4, 5))
        # After the shift the last segment takes (4, 5) too
        shape_snake(game, [(5, 5), (4, 5), (4, 6)])
        game.tick()
        assert game.snake.positions()[:3] == [(4, 5), (5, 5), (4, 5)]
        assert game.state == RUNNING
        assert game.snake.length() == 4

    def test_length_and_score_invariants(self):
        """Length changes by at most one per tick and score is 10x length."""
        sounds = default_sound_board()
        game = GameLoop(GameConfig(seed=11), sound_board=sounds)
        player = RandomPlayer(random.Random(11))

        for _ in range(300):
            key = player.get_key(game.get_current_state())
            if game.game_over:
                game.handle_key(key)
                continue
            game.handle_key(key)

            before = game.snake.length()
            collected = sounds.get("collect").play_count
            game.tick()
            after = game.snake.length()

            if sounds.get("collect").play_count > collected:
                assert after == before + 1
            else:
                assert after == before
            assert game.score == 10 * after


class TestGameLoopInput:
    """Tests for key handling and restart."""

    def test_key_bindings(self):
        """Arrow names and WASD map to directions."""
        assert KEY_BINDINGS["up"] == UP
        assert KEY_BINDINGS["a"] == LEFT
        assert KEY_BINDINGS["d"] == RIGHT

    def test_direction_key_changes_direction(self):
        """A direction key steers the next tick."""
        game = GameLoop(small_config())
        game.handle_key("Up")
        game.tick()
        assert game.snake.head == (5, 4)

    def test_unknown_keys_ignored(self):
        """Unbound keys and None leave the game untouched."""
        game = GameLoop(small_config())
        for key in ("x", "space", None, 42):
            game.handle_key(key)
        assert game.snake.direction == LEFT

    def test_restart_ignored_while_running(self):
        """The restart key does nothing during play."""
        game = GameLoop(small_config())
        game.tick()
        game_id = game.game_id
        game.handle_key("r")
        assert game.game_id == game_id
        assert game.snake.head == (4, 5)
        assert game.restart() is False

    def test_directions_ignored_after_game_over(self):
        """Only restart does anything once the game is over."""
        game = GameLoop(small_config(start_x=2))
        game.tick()
        game.handle_key("up")
        assert game.snake.direction == LEFT

    def test_restart_resets_everything(self):
        """Restart rebuilds snake and board from the configuration."""
        canvas = CanvasRenderSink()
        game = GameLoop(small_config(start_x=3, food_count=3), render_sink=canvas)
        game.board.spawn_food((2, 5))
        game.tick()
        assert game.score == 20
        old_snake, old_board = game.snake, game.board

        game.tick()
        assert game.game_over

        game.handle_key("R")

        assert game.state == RUNNING
        assert game.snake is not old_snake
        assert game.board is not old_board
        assert game.score == 10
        assert game.snake.head == (3, 5)
        assert game.snake.direction == LEFT
        assert len(game.board.food) == 3
        assert game.tick_number == 0
        assert len(game.history) == 1
        assert game.games_played == 2
        assert canvas.banner is None
        assert canvas.score_text == "Score: 10"


class TestSnapshotsAndReplays:
    """Tests for state snapshots and replay files."""

    def test_get_current_state(self):
        """get_current_state() returns a GameState snapshot."""
        game = GameLoop(small_config())
        game.board.spawn_food((8, 8))
        state = game.get_current_state()

        assert isinstance(state, GameState)
        assert state.snake_positions == [(5, 5)]
        assert state.food == [(8, 8)]
        assert state.bounds == (1, 10, 1, 10)
        assert state.score == 10
        assert state.state == RUNNING

    def test_history_grows_per_tick(self):
        """Each running tick records one snapshot."""
        game = GameLoop(small_config())
        game.tick()
        game.tick()
        assert [s.tick_number for s in game.history] == [0, 1, 2]

    def test_save_history_to_json(self, tmp_path):
        """Replays carry metadata and one round per snapshot."""
        game = GameLoop(small_config(start_x=3))
        game.tick()
        game.tick()

        path = game.save_history_to_json(directory=str(tmp_path))
        with open(path) as f:
            data = json.load(f)

        assert data["metadata"]["game_id"] == game.game_id
        assert data["metadata"]["final_score"] == 10
        assert data["metadata"]["death_info"] == {"reason": "wall", "tick": 2}
        assert len(data["rounds"]) == 3
        assert data["rounds"][-1]["state"] == GAME_OVER


class TestRunSession:
    """Tests for run_session()."""

    def test_session_ends_on_game_over(self):
        """Without restarts the session stops at the first death."""
        result = run_session(small_config(), ScriptedPlayer([]), ticker_factory=FakeTicker)
        assert result["ticks"] == 4
        assert result["game_over"] is True
        assert result["death_reason"] == "wall"
        assert result["final_score"] == 10
        assert result["games_played"] == 1

    def test_session_restarts(self):
        """The player's restart key re-arms the ticker for a new game."""
        player = ScriptedPlayer([None, None, None, None, "r"])
        result = run_session(small_config(), player, restarts=1, ticker_factory=FakeTicker)
        assert result["games_played"] == 2
        assert result["ticks"] == 8
        assert result["game_over"] is True

    def test_session_without_restart_key(self):
        """A player that never presses 'r' ends the session."""
        result = run_session(small_config(), ScriptedPlayer([]), restarts=3, ticker_factory=FakeTicker)
        assert result["games_played"] == 1

    def test_session_max_ticks(self):
        """max_ticks caps a session that is still running."""
        player = ScriptedPlayer(["up", "right", "down", "left"] * 5)
        result = run_session(small_config(), player, max_ticks=6, ticker_factory=FakeTicker)
        assert result["ticks"] == 6
        assert result["game_over"] is False

    def test_session_writes_replays(self, tmp_path):
        """Every finished game is saved when a replay directory is given."""
        player = ScriptedPlayer([None, None, None, None, "r"])
        result = run_session(
            small_config(), player, restarts=1,
            replay_dir=str(tmp_path), ticker_factory=FakeTicker,
        )
        assert len(result["replays"]) == 2
        assert all(os.path.exists(p) for p in result["replays"])

    def test_session_input_before_movement(self):
        """The key read on a tick steers that same tick."""
        player = Mock()
        player.get_key = Mock(side_effect=["up", None, None, None, None])
        result = run_session(small_config(), player, ticker_factory=FakeTicker)
        # Straight up from (5,5) hits y=1 on the fourth tick
        assert result["ticks"] == 4
        assert result["death_reason"] == "wall"

    def test_tick_limit_on_death_tick_does_not_restart(self, tmp_path):
        """A tick limit reached on the death tick ends the session without restarting."""
        player = ScriptedPlayer([None, None, None, None, "r"])
        result = run_session(
            small_config(), player, max_ticks=4, restarts=1,
            replay_dir=str(tmp_path), ticker_factory=FakeTicker,
        )
        assert result["ticks"] == 4
        assert result["games_played"] == 1
        assert result["game_over"] is True
        assert result["death_reason"] == "wall"
        assert len(result["replays"]) == 1
