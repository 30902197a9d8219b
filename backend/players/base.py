"""
Base player interface for the game engine.
"""

from typing import Optional

from domain.game_state import GameState


class Player:
    """
    Base class/interface for input sources.

    A player looks at the current game state once per tick and returns
    the name of the key it presses, or None to press nothing.
    """

    def get_key(self, game_state: GameState) -> Optional[str]:
        """
        Return a key press given the current game state.

        Args:
            game_state: Current state of the game

        Returns:
            A key name such as "up", "left" or "r", or None
        """
        raise NotImplementedError
