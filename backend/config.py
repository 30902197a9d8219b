"""
Game configuration, with optional overrides from the environment.

Recognised variables (a .env file is honoured via python-dotenv):
    SNAKE_BOUNDS                 min_x,max_x,min_y,max_y
    SNAKE_START                  x,y
    SNAKE_FOOD_COUNT             int
    SNAKE_OBSTACLE_COUNT         int
    SNAKE_FPS                    float
    SNAKE_SEED                   int
    SNAKE_MAX_PLACEMENT_ATTEMPTS int
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from domain.board import Bounds
from domain.constants import (
    BOUNDARY_X,
    BOUNDARY_Y,
    DEFAULT_FPS,
    FOOD_COUNT,
    MAX_PLACEMENT_ATTEMPTS,
    OBSTACLE_COUNT,
    START_POSITION,
)


def _parse_ints(name: str, raw: str, count: int) -> Tuple[int, ...]:
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != count:
        raise ValueError(f"{name} must have {count} comma-separated integers, got {raw!r}")
    try:
        return tuple(int(p) for p in parts)
    except ValueError:
        raise ValueError(f"{name} must contain integers, got {raw!r}") from None


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class GameConfig:
    min_x: int = BOUNDARY_X[0]
    max_x: int = BOUNDARY_X[1]
    min_y: int = BOUNDARY_Y[0]
    max_y: int = BOUNDARY_Y[1]
    start_x: int = START_POSITION[0]
    start_y: int = START_POSITION[1]
    food_count: int = FOOD_COUNT
    obstacle_count: int = OBSTACLE_COUNT
    fps: float = DEFAULT_FPS
    max_placement_attempts: int = MAX_PLACEMENT_ATTEMPTS
    seed: Optional[int] = None

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.min_x, self.max_x, self.min_y, self.max_y)

    @property
    def start_position(self) -> Tuple[int, int]:
        return (self.start_x, self.start_y)

    def validate(self) -> "GameConfig":
        """Raise ValueError if the configuration cannot produce a playable board."""
        if self.bounds.interior_size() == 0:
            raise ValueError(f"Bounds {tuple(self.bounds)} leave no interior cells")
        if not self.bounds.in_interior(self.start_position):
            raise ValueError(
                f"Start position {self.start_position} is outside the interior of {tuple(self.bounds)}"
            )
        if self.food_count < 0 or self.obstacle_count < 0:
            raise ValueError("Food and obstacle counts must not be negative")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.max_placement_attempts <= 0:
            raise ValueError("max_placement_attempts must be positive")
        return self

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "GameConfig":
        if load_dotenv_file:
            load_dotenv()

        config = cls()

        raw_bounds = os.getenv("SNAKE_BOUNDS")
        if raw_bounds:
            config.min_x, config.max_x, config.min_y, config.max_y = _parse_ints(
                "SNAKE_BOUNDS", raw_bounds, 4
            )

        raw_start = os.getenv("SNAKE_START")
        if raw_start:
            config.start_x, config.start_y = _parse_ints("SNAKE_START", raw_start, 2)

        config.food_count = _env_int("SNAKE_FOOD_COUNT", config.food_count)
        config.obstacle_count = _env_int("SNAKE_OBSTACLE_COUNT", config.obstacle_count)
        config.fps = _env_float("SNAKE_FPS", config.fps)
        config.seed = _env_int("SNAKE_SEED", config.seed)
        config.max_placement_attempts = _env_int(
            "SNAKE_MAX_PLACEMENT_ATTEMPTS", config.max_placement_attempts
        )

        return config.validate()
