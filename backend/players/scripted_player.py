"""
Scripted player - replays a fixed sequence of key presses.
"""

from typing import Iterable, Optional

from domain.game_state import GameState
from .base import Player


class ScriptedPlayer(Player):
    """
    Presses one key per tick from a fixed script, then nothing.

    None entries in the script mean "no key this tick".
    """

    def __init__(self, keys: Iterable[Optional[str]]):
        self.keys = list(keys)
        self._index = 0

    @property
    def exhausted(self) -> bool:
        return self._index >= len(self.keys)

    def get_key(self, game_state: GameState) -> Optional[str]:
        if self.exhausted:
            return None
        key = self.keys[self._index]
        self._index += 1
        return key
