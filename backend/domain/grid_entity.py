"""
Positioned entities on the integer grid.
"""

import itertools
from typing import NamedTuple, Optional

from .constants import ENTITY_COLORS, ENTITY_KINDS


_entity_ids = itertools.count(1)


class Position(NamedTuple):
    """An (x, y) cell on the grid."""

    x: int
    y: int

    def shifted(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)


class GridEntity:
    """
    A single cell-sized object on the board: a snake segment, a piece of
    food or an obstacle.

    Attributes:
        entity_id: unique id used by the render sink to address this cell
        kind: one of SEGMENT, FOOD, OBSTACLE
        position: current Position
        stroke, fill: display colours for the render sink
        removed: True once remove() has been called
    """

    def __init__(
        self,
        kind: str,
        position,
        sink=None,
        stroke: Optional[str] = None,
        fill: Optional[str] = None,
    ):
        if kind not in ENTITY_KINDS:
            raise ValueError(f"Unknown entity kind: {kind}")

        default_stroke, default_fill = ENTITY_COLORS[kind]
        self.entity_id = next(_entity_ids)
        self.kind = kind
        self.position = Position(*position)
        self.stroke = stroke or default_stroke
        self.fill = fill or default_fill
        self.removed = False
        self._sink = sink

        if self._sink is not None:
            self._sink.draw_cell(
                self.entity_id, self.position.x, self.position.y, self.stroke, self.fill
            )

    @property
    def x(self) -> int:
        return self.position.x

    @property
    def y(self) -> int:
        return self.position.y

    def move_to(self, position) -> None:
        # No bounds or occupancy validation here; callers decide legality.
        self.position = Position(*position)
        if self._sink is not None:
            self._sink.move_cell(self.entity_id, self.position.x, self.position.y)

    def move_by(self, dx: int, dy: int) -> None:
        self.move_to(self.position.shifted(dx, dy))

    def remove(self) -> bool:
        """Hide this entity. Safe to call more than once."""
        if not self.removed:
            self.removed = True
            if self._sink is not None:
                self._sink.hide_cell(self.entity_id)
        return True

    def __repr__(self):
        return f"<GridEntity #{self.entity_id} {self.kind} at {tuple(self.position)}>"
