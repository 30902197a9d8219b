"""
Domain entities for the grid snake game engine.

This module contains the core game entities that are independent of
infrastructure concerns (rendering, audio, timing, etc.).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, DIRECTION_VECTORS,
    SEGMENT, FOOD, OBSTACLE, POINTS_PER_SEGMENT,
    RUNNING, GAME_OVER, GAME_OVER_MESSAGE, RESTART_HINT,
    SOUND_COLLECT, SOUND_DEATH,
)
from .grid_entity import GridEntity, Position
from .snake import SnakeBody
from .board import Board, Bounds, BoardSaturatedError
from .game_state import GameState

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'DIRECTION_VECTORS',
    'SEGMENT', 'FOOD', 'OBSTACLE', 'POINTS_PER_SEGMENT',
    'RUNNING', 'GAME_OVER', 'GAME_OVER_MESSAGE', 'RESTART_HINT',
    'SOUND_COLLECT', 'SOUND_DEATH',
    'GridEntity', 'Position',
    'SnakeBody',
    'Board', 'Bounds', 'BoardSaturatedError',
    'GameState',
]
