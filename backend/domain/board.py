"""
Board entity: food, obstacles, the border and every collision query.
"""

import logging
import random
from typing import Iterable, List, NamedTuple, Optional

from .constants import (
    FOOD,
    MAX_PLACEMENT_ATTEMPTS,
    OBSTACLE,
    POINTS_PER_SEGMENT,
)
from .grid_entity import GridEntity, Position

logger = logging.getLogger(__name__)


class BoardSaturatedError(RuntimeError):
    """No free cell could be found for a random placement."""


class Bounds(NamedTuple):
    """Rectangular playfield; the edge coordinates are inclusive."""

    min_x: int
    max_x: int
    min_y: int
    max_y: int

    def is_edge(self, position) -> bool:
        x, y = position
        return x in (self.min_x, self.max_x) or y in (self.min_y, self.max_y)

    def in_interior(self, position) -> bool:
        x, y = position
        return self.min_x < x < self.max_x and self.min_y < y < self.max_y

    def interior_size(self) -> int:
        return max(0, self.max_x - self.min_x - 1) * max(0, self.max_y - self.min_y - 1)


class Board:
    """
    Owns the food and obstacle entities and answers collision queries
    against them, the bounds and the snake.

    Attributes:
        bounds: the Bounds of the playfield
        snake: the SnakeBody sharing this board (may be attached later)
        food: food entities in spawn order
        obstacles: obstacles placed inside the playfield
        border: obstacle entities framing the bounds (drawn, not scanned)
    """

    def __init__(
        self,
        bounds: Bounds,
        snake=None,
        sink=None,
        rng: Optional[random.Random] = None,
        max_placement_attempts: int = MAX_PLACEMENT_ATTEMPTS,
    ):
        self.bounds = Bounds(*bounds)
        self.snake = snake
        self.food: List[GridEntity] = []
        self.obstacles: List[GridEntity] = []
        self.border: List[GridEntity] = []
        self._sink = sink
        self._rng = rng or random.Random()
        self.max_placement_attempts = max_placement_attempts

    # ------------------------------------------------------------------
    # Collision primitives
    # ------------------------------------------------------------------

    @staticmethod
    def find_at(position, items: Iterable[GridEntity]) -> Optional[GridEntity]:
        """Return the first entity in items sitting on position, or None."""
        position = Position(*position)
        for item in items:
            if item.position == position:
                return item
        return None

    def _snake_segments(self) -> List[GridEntity]:
        if self.snake is None:
            return []
        return list(self.snake.segments())

    def is_occupied(self, position) -> bool:
        """Is any tracked entity (food, obstacle, border, snake) on position?"""
        return (
            self.find_at(position, self.obstacles) is not None
            or self.find_at(position, self.food) is not None
            or self.find_at(position, self.border) is not None
            or self.find_at(position, self._snake_segments()) is not None
        )

    def is_food_at(self, position) -> bool:
        return self.find_at(position, self.food) is not None

    def is_obstacle_at(self, position) -> bool:
        return self.find_at(position, self.obstacles) is not None

    def is_boundary(self, position) -> bool:
        return self.bounds.is_edge(position)

    def crashed_into_obstacle(self, position) -> bool:
        """Boundary hit or obstacle hit; the border entities are not scanned."""
        return self.is_boundary(position) or self.is_obstacle_at(position)

    def crashed_into_self(self) -> bool:
        """Check the snake's head against the rest of its segments."""
        if self.snake is None:
            return False
        segments = self._snake_segments()
        return self.find_at(segments[0].position, segments[1:]) is not None

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def random_coordinate(self) -> Position:
        """A uniformly random interior cell, free or not."""
        return Position(
            self._rng.randint(self.bounds.min_x + 1, self.bounds.max_x - 1),
            self._rng.randint(self.bounds.min_y + 1, self.bounds.max_y - 1),
        )

    def random_free_position(self) -> Position:
        """
        Resample interior cells until one is free.

        Raises:
            BoardSaturatedError: if max_placement_attempts draws all collided
        """
        if self.bounds.interior_size() > 0:
            for _ in range(self.max_placement_attempts):
                position = self.random_coordinate()
                if not self.is_occupied(position):
                    return position

        raise BoardSaturatedError(
            f"No free cell found after {self.max_placement_attempts} attempts "
            f"on a {self.bounds.interior_size()}-cell interior"
        )

    def spawn_food(self, position) -> Optional[GridEntity]:
        # Don't add food over anything
        if self.is_occupied(position):
            logger.debug(f"Food spawn at {tuple(position)} skipped: cell occupied")
            return None
        item = GridEntity(FOOD, position, sink=self._sink)
        self.food.append(item)
        return item

    def spawn_obstacle(self, position) -> Optional[GridEntity]:
        # Don't add obstacles over anything
        if self.is_occupied(position):
            logger.debug(f"Obstacle spawn at {tuple(position)} skipped: cell occupied")
            return None
        item = GridEntity(OBSTACLE, position, sink=self._sink)
        self.obstacles.append(item)
        return item

    def build_border(self, bounds: Optional[Bounds] = None) -> List[GridEntity]:
        """
        Frame the playfield with obstacle entities.

        The border is kept apart from self.obstacles: boundary collision is
        decided from the bounds alone.
        """
        bounds = Bounds(*(bounds or self.bounds))

        # Horizontal bars
        for y in (bounds.min_y, bounds.max_y):
            for x in range(bounds.min_x, bounds.max_x + 1):
                self.border.append(GridEntity(OBSTACLE, (x, y), sink=self._sink))

        # Vertical bars, corners already drawn
        for x in (bounds.min_x, bounds.max_x):
            for y in range(bounds.min_y + 1, bounds.max_y):
                self.border.append(GridEntity(OBSTACLE, (x, y), sink=self._sink))

        return self.border

    # ------------------------------------------------------------------
    # Consumption and scoring
    # ------------------------------------------------------------------

    def consume_food_at(self, position) -> Optional[GridEntity]:
        """Remove and return the food on position; respawning is the caller's job."""
        position = Position(*position)
        index = next(
            (i for i, item in enumerate(self.food) if item.position == position),
            None,
        )
        if index is None:
            return None

        item = self.food.pop(index)
        item.remove()
        return item

    def score(self) -> int:
        if self.snake is None:
            return 0
        return self.snake.length() * POINTS_PER_SEGMENT

    def food_positions(self) -> List[Position]:
        return [item.position for item in self.food]

    def obstacle_positions(self) -> List[Position]:
        return [item.position for item in self.obstacles]

    def __repr__(self):
        return (
            f"<Board bounds={tuple(self.bounds)} food={len(self.food)} "
            f"obstacles={len(self.obstacles)} border={len(self.border)}>"
        )
