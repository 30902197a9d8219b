"""
Random player implementation - picks random safe moves.
"""

import random
from typing import List, Optional

from domain.constants import DIRECTION_VECTORS, GAME_OVER, VALID_MOVES
from domain.game_state import GameState
from .base import Player


class RandomPlayer(Player):
    """
    A random autopilot that picks a direction avoiding the boundary,
    obstacles and its own body, and asks for a restart once the game is over.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def safe_moves(self, game_state: GameState) -> List[str]:
        min_x, max_x, min_y, max_y = game_state.bounds
        head_x, head_y = game_state.head
        obstacles = set(game_state.obstacles)
        # The tail moves out of the way on the next tick
        body = set(game_state.snake_positions[1:-1])

        valid_moves: List[str] = []
        for move in sorted(VALID_MOVES):
            dx, dy = DIRECTION_VECTORS[move]
            new_x, new_y = head_x + dx, head_y + dy

            # Check boundary collisions
            if new_x in (min_x, max_x) or new_y in (min_y, max_y):
                continue

            if (new_x, new_y) in obstacles or (new_x, new_y) in body:
                continue

            valid_moves.append(move)
        return valid_moves

    def get_key(self, game_state: GameState) -> Optional[str]:
        if game_state.state == GAME_OVER:
            return "r"

        valid_moves = self.safe_moves(game_state)

        # Prefer going straight when it is safe; turns keep the snake wandering
        if game_state.direction in valid_moves and self.rng.random() < 0.7:
            return game_state.direction.lower()

        # If no valid moves, just return a random move (we'll die anyway)
        if not valid_moves:
            return self.rng.choice(sorted(VALID_MOVES)).lower()

        return self.rng.choice(valid_moves).lower()
