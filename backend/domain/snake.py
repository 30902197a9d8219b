"""
Snake entity for the game engine.
"""

import logging
from typing import List, Optional, Tuple

from .constants import (
    DEFAULT_DIRECTION,
    DIRECTION_VECTORS,
    HEAD_COLORS,
    SEGMENT,
    VALID_MOVES,
)
from .grid_entity import GridEntity, Position

logger = logging.getLogger(__name__)


class SnakeBody:
    """
    Represents the player's snake as a chain of grid segments.

    Attributes:
        direction: current direction name, applied on the next advance()
        alive: whether this snake is still alive
        death_reason: e.g., 'wall', 'obstacle', 'self'
        death_tick: the tick number when the snake died
    """

    def __init__(self, start_position, sink=None):
        self._sink = sink
        self._segments: List[GridEntity] = []
        self.direction = DEFAULT_DIRECTION
        self.alive = True
        self.death_reason: Optional[str] = None
        self.death_tick: Optional[int] = None

        stroke, fill = HEAD_COLORS
        self._segments.append(
            GridEntity(SEGMENT, start_position, sink=sink, stroke=stroke, fill=fill)
        )

    @property
    def head(self) -> Position:
        """Return the head position (first segment)."""
        return self._segments[0].position

    def head_position(self) -> Position:
        return self.head

    def length(self) -> int:
        return len(self._segments)

    def segments(self) -> Tuple[GridEntity, ...]:
        return tuple(self._segments)

    def positions(self) -> List[Position]:
        """Segment positions from head to tail."""
        return [segment.position for segment in self._segments]

    def direction_vector(self) -> Tuple[int, int]:
        return DIRECTION_VECTORS[self.direction]

    def change_direction(self, direction: str) -> None:
        """
        Record the direction for the next advance().

        Reversing onto the second segment is allowed; it ends the game on
        the following tick.
        """
        if direction not in VALID_MOVES:
            logger.debug(f"Ignoring invalid direction {direction!r}")
            return
        self.direction = direction

    def grow(self) -> GridEntity:
        """Append a new tail segment and return it."""
        tail = self._segments[-1]
        segment = GridEntity(SEGMENT, tail.position, sink=self._sink)

        # A lone head gets a coincident tail that separates on the next
        # advance; longer bodies get a tail one step behind the old one.
        if len(self._segments) > 1:
            dx, dy = self.direction_vector()
            segment.move_by(-dx, -dy)

        self._segments.append(segment)
        return segment

    def advance(self) -> Position:
        """Move the whole chain one cell forward and return the new head."""
        # Tail to head: each segment takes the old position of the one in front.
        for index in range(len(self._segments) - 1, 0, -1):
            self._segments[index].move_to(self._segments[index - 1].position)

        dx, dy = self.direction_vector()
        self._segments[0].move_by(dx, dy)
        return self.head

    def is_alive(self) -> bool:
        return self.alive

    def kill(self, reason: Optional[str] = None, tick: Optional[int] = None) -> None:
        if not self.alive:
            return
        self.alive = False
        self.death_reason = reason
        self.death_tick = tick

    def __repr__(self):
        return (
            f"<SnakeBody length={self.length()} head={tuple(self.head)} "
            f"direction={self.direction} alive={self.alive}>"
        )
