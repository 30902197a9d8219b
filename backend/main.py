import argparse
import json
import logging
import os
import random
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from config import GameConfig
from domain.board import Board
from domain.constants import (
    DOWN,
    GAME_OVER,
    GAME_OVER_MESSAGE,
    LEFT,
    RESTART_HINT,
    RIGHT,
    RUNNING,
    SOUND_COLLECT,
    SOUND_DEATH,
    UP,
)
from domain.game_state import GameState
from domain.snake import SnakeBody
from players import Player, RandomPlayer, ScriptedPlayer
from services.render_sink import CanvasRenderSink, RenderSink
from services.sound_board import SoundBoard, default_sound_board
from services.ticker import Ticker

logger = logging.getLogger(__name__)

# Key name -> direction
KEY_BINDINGS = {
    "up": UP,
    "w": UP,
    "down": DOWN,
    "s": DOWN,
    "left": LEFT,
    "a": LEFT,
    "right": RIGHT,
    "d": RIGHT,
}
RESTART_KEY = "r"


class GameLoop:
    """
    Drives one snake on one board, one tick at a time.

    States:
      - running: keys steer the snake, ticks move it
      - game_over: only the restart key does anything; it rebuilds the
        snake and the board from the configuration
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_sink: Optional[RenderSink] = None,
        sound_board: Optional[SoundBoard] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = (config or GameConfig()).validate()
        self.sink = render_sink or RenderSink()
        self.sounds = sound_board or default_sound_board()
        self.rng = rng or random.Random(self.config.seed)
        self.games_played = 0

        self.setup()

    def setup(self):
        """Build a fresh snake and board, discarding any previous game."""
        self.sink.clear()

        self.game_id = str(uuid.uuid4())
        self.start_time = time.time()
        self.tick_number = 0
        self.state = RUNNING
        self.history: List[GameState] = []

        self.snake = SnakeBody(self.config.start_position, sink=self.sink)
        self.board = Board(
            self.config.bounds,
            snake=self.snake,
            sink=self.sink,
            rng=self.rng,
            max_placement_attempts=self.config.max_placement_attempts,
        )

        # Add some food and obstacles at random positions
        for _ in range(self.config.food_count):
            self.board.spawn_food(self.board.random_free_position())
        for _ in range(self.config.obstacle_count):
            self.board.spawn_obstacle(self.board.random_free_position())

        self.board.build_border()

        self.games_played += 1
        self.sink.show_score(self.score)
        logger.info(
            f"Game {self.game_id} set up: snake at {tuple(self.snake.head)}, "
            f"{len(self.board.food)} food, {len(self.board.obstacles)} obstacles"
        )
        self.record_history()

    @property
    def score(self) -> int:
        return self.board.score()

    @property
    def game_over(self) -> bool:
        return self.state == GAME_OVER

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_key(self, key: Optional[str]) -> None:
        """Route a key press: arrows/WASD steer, 'r' restarts after game over."""
        if key is None:
            return

        name = str(key).lower()
        if name == RESTART_KEY:
            self.restart()
            return

        direction = KEY_BINDINGS.get(name)
        if direction is None:
            logger.debug(f"Ignoring unbound key {key!r}")
            return
        self.change_direction(direction)

    def change_direction(self, direction: str) -> None:
        if self.state != RUNNING:
            logger.debug(f"Ignoring direction {direction} after game over")
            return
        self.snake.change_direction(direction)

    def restart(self) -> bool:
        """Start a new game. Only valid once the current one is over."""
        if self.state != GAME_OVER:
            logger.debug("Ignoring restart while the game is running")
            return False
        logger.info(f"Restarting after game {self.game_id} (score {self.score})")
        self.setup()
        return True

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> str:
        """
        Execute one tick:
          1) If the game is over, do nothing
          2) Move the snake
          3) Food at the new head: grow, replace the food, score
          4) Otherwise boundary, obstacle or own body at the new head: die
        Returns the state after the tick.
        """
        if self.state == GAME_OVER:
            logger.debug("Tick ignored: game is over")
            return self.state

        self.tick_number += 1
        head = self.snake.advance()

        if self.board.is_food_at(head):
            self.snake.grow()
            self.board.consume_food_at(head)
            self.board.spawn_food(self.board.random_free_position())
            self.sink.show_score(self.score)
            self.sounds.play(SOUND_COLLECT)
            logger.info(f"Tick {self.tick_number}: ate food at {tuple(head)}, score {self.score}")
        else:
            reason = self._crash_reason(head)
            if reason is not None:
                self._die(reason)

        self.record_history()
        return self.state

    def _crash_reason(self, head) -> Optional[str]:
        if self.board.crashed_into_obstacle(head):
            return "wall" if self.board.is_boundary(head) else "obstacle"
        if self.board.crashed_into_self():
            return "self"
        return None

    def _die(self, reason: str) -> None:
        self.snake.kill(reason=reason, tick=self.tick_number)
        self.state = GAME_OVER
        self.sounds.play(SOUND_DEATH)
        self.sink.show_banner(GAME_OVER_MESSAGE, RESTART_HINT)
        logger.info(
            f"Game Over: snake hit {reason} at {tuple(self.snake.head)} "
            f"on tick {self.tick_number}, score {self.score}"
        )

    # ------------------------------------------------------------------
    # Snapshots and replays
    # ------------------------------------------------------------------

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        return GameState(
            tick_number=self.tick_number,
            state=self.state,
            snake_positions=[tuple(p) for p in self.snake.positions()],
            direction=self.snake.direction,
            alive=self.snake.alive,
            score=self.score,
            bounds=tuple(self.board.bounds),
            food=[tuple(p) for p in self.board.food_positions()],
            obstacles=[tuple(p) for p in self.board.obstacle_positions()],
            death_reason=self.snake.death_reason,
        )

    def record_history(self):
        self.history.append(self.get_current_state())

    def serialize_history(self) -> List[Dict[str, Any]]:
        """
        Convert the list of GameState objects to a JSON-serializable list of dicts.
        """
        return [state.to_dict() for state in self.history]

    def save_history_to_json(self, filename: Optional[str] = None, directory: str = "completed_games") -> str:
        if filename is None:
            filename = f"snake_game_{self.game_id}.json"

        metadata = {
            "game_id": self.game_id,
            "start_time": datetime.fromtimestamp(self.start_time, tz=timezone.utc).isoformat(),
            "end_time": datetime.now(timezone.utc).isoformat(),
            "final_score": self.score,
            "state": self.state,
            "death_info": {
                "reason": self.snake.death_reason,
                "tick": self.snake.death_tick,
            },
            "ticks": self.tick_number,
            "bounds": list(self.board.bounds),
        }

        data = {
            "metadata": metadata,
            "rounds": self.serialize_history(),
        }

        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, filename)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info(f"Saved replay for game {self.game_id} to {path}")
        return path


# -------------------------------
# Session Function
# -------------------------------

def run_session(
    config: GameConfig,
    player: Player,
    max_ticks: Optional[int] = None,
    restarts: int = 0,
    render_sink: Optional[RenderSink] = None,
    sound_board: Optional[SoundBoard] = None,
    replay_dir: Optional[str] = None,
    ticker_factory: Callable[..., Ticker] = Ticker,
) -> Dict[str, Any]:
    """
    Runs games driven by a fixed-rate ticker and a player.

    Args:
        config: game settings
        player: input source asked for a key before every tick
        max_ticks: stop after this many ticks in total (None = until game over)
        restarts: how many times to restart after a game over
        render_sink, sound_board: optional collaborators
        replay_dir: if set, every finished game is saved there as JSON
        ticker_factory: callable(fps, callback) returning a Ticker

    Returns:
        A dictionary summarizing the session.
    """
    game = GameLoop(config, render_sink=render_sink, sound_board=sound_board)
    replay_paths: List[str] = []

    def on_tick():
        # Input before movement
        game.handle_key(player.get_key(game.get_current_state()))
        game.tick()
        if game.game_over:
            ticker.stop()

    ticker = ticker_factory(config.fps, on_tick)
    restarts_left = restarts

    while True:
        ticker.start(max_ticks=max_ticks)

        if replay_dir:
            replay_paths.append(game.save_history_to_json(directory=replay_dir))

        if not game.game_over or restarts_left <= 0:
            break
        if max_ticks is not None and ticker.ticks >= max_ticks:
            logger.info("Tick limit reached on the final tick; not restarting")
            break

        game.handle_key(player.get_key(game.get_current_state()))
        if game.game_over:
            logger.info("Player did not restart; ending session")
            break
        restarts_left -= 1

    return {
        "game_id": game.game_id,
        "final_score": game.score,
        "ticks": ticker.ticks,
        "games_played": game.games_played,
        "game_over": game.game_over,
        "death_reason": game.snake.death_reason,
        "replays": replay_paths,
    }


# -------------------------------
# Example Usage (Main Entry Point)
# -------------------------------
def main():
    parser = argparse.ArgumentParser(
        description="Run a headless snake game driven by an autopilot or a scripted key sequence."
    )
    parser.add_argument("--player", choices=["random", "script"], default="random",
                        help="Input source for the snake")
    parser.add_argument("--keys", type=str, default="",
                        help="Comma-separated key presses for --player script (empty entries skip a tick)")
    parser.add_argument("--fps", type=float, default=None,
                        help="Ticks per second (default from SNAKE_FPS or 5)")
    parser.add_argument("--max-ticks", type=int, default=None,
                        help="Stop after this many ticks")
    parser.add_argument("--restarts", type=int, default=0,
                        help="Number of restarts after game over")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for food and obstacle placement")
    parser.add_argument("--replay-dir", type=str, default=None,
                        help="Directory to write replay JSON files to")
    parser.add_argument("--snapshot", type=str, default=None,
                        help="Write a PNG of the final screen to this path")
    parser.add_argument("--log-level", type=str, default="INFO",
                        help="Logging level (DEBUG, INFO, WARNING, ...)")

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = GameConfig.from_env()
    if args.fps is not None:
        config.fps = args.fps
    if args.seed is not None:
        config.seed = args.seed
    config.validate()

    if args.player == "script":
        keys = [k.strip() or None for k in args.keys.split(",")] if args.keys else []
        player = ScriptedPlayer(keys)
    else:
        player = RandomPlayer(random.Random(config.seed))

    canvas = CanvasRenderSink()
    result = run_session(
        config,
        player,
        max_ticks=args.max_ticks,
        restarts=args.restarts,
        render_sink=canvas,
        replay_dir=args.replay_dir,
    )

    if args.snapshot:
        canvas.to_image().save(args.snapshot)
        logger.info(f"Final screen written to {args.snapshot}")

    print("\nSession Result Summary:")
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
