"""
GameState entity - a snapshot of the game at a point in time.
"""

from typing import Any, Dict, List, Optional, Tuple


class GameState:
    """
    A snapshot of the game at a specific point in time.

    Attributes:
        tick_number: how many ticks have run since setup (0-based)
        state: 'running' or 'game_over'
        snake_positions: list of (x, y) from head to tail
        direction: the snake's current direction
        alive: whether the snake is alive
        death_reason: why the snake died, if it did
        score: current score
        bounds: (min_x, max_x, min_y, max_y), edges inclusive
        food: list of (x, y) positions of all food on the board
        obstacles: list of (x, y) positions of obstacles inside the board
    """

    def __init__(
        self,
        tick_number: int,
        state: str,
        snake_positions: List[Tuple[int, int]],
        direction: str,
        alive: bool,
        score: int,
        bounds: Tuple[int, int, int, int],
        food: List[Tuple[int, int]],
        obstacles: List[Tuple[int, int]],
        death_reason: Optional[str] = None,
    ):
        self.tick_number = tick_number
        self.state = state
        self.snake_positions = snake_positions
        self.direction = direction
        self.alive = alive
        self.score = score
        self.bounds = bounds
        self.food = food
        self.obstacles = obstacles
        self.death_reason = death_reason

    @property
    def head(self) -> Tuple[int, int]:
        return self.snake_positions[0]

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        # = obstacle or border
        S = snake body
        H = snake head
        Rows run top to bottom, matching screen coordinates.
        """
        min_x, max_x, min_y, max_y = self.bounds
        width = max_x - min_x + 1
        height = max_y - min_y + 1

        board = [['.' for _ in range(width)] for _ in range(height)]

        for y in range(height):
            for x in range(width):
                if y in (0, height - 1) or x in (0, width - 1):
                    board[y][x] = '#'

        def place(position, marker):
            x, y = position
            if min_x <= x <= max_x and min_y <= y <= max_y:
                board[y - min_y][x - min_x] = marker

        for position in self.obstacles:
            place(position, '#')
        for position in self.food:
            place(position, 'F')

        if self.alive:
            # Body first so the head wins on a coincident segment
            for position in reversed(self.snake_positions[1:]):
                place(position, 'S')
        if self.snake_positions:
            place(self.snake_positions[0], 'H' if self.alive else 'X')

        return "\n".join(''.join(row) for row in board)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick_number": self.tick_number,
            "state": self.state,
            "snake_positions": [list(p) for p in self.snake_positions],
            "direction": self.direction,
            "alive": self.alive,
            "death_reason": self.death_reason,
            "score": self.score,
            "bounds": list(self.bounds),
            "food": [list(p) for p in self.food],
            "obstacles": [list(p) for p in self.obstacles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        try:
            return cls(
                tick_number=data["tick_number"],
                state=data["state"],
                snake_positions=[tuple(p) for p in data["snake_positions"]],
                direction=data["direction"],
                alive=data["alive"],
                score=data["score"],
                bounds=tuple(data["bounds"]),
                food=[tuple(p) for p in data.get("food", [])],
                obstacles=[tuple(p) for p in data.get("obstacles", [])],
                death_reason=data.get("death_reason"),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed game state: {e}") from e

    def __repr__(self):
        return (
            f"<GameState tick={self.tick_number} state={self.state} "
            f"head={self.snake_positions[0] if self.snake_positions else None} "
            f"score={self.score}>"
        )
