"""
Player implementations for the grid snake.

This module contains the input-source abstractions that press keys
for the game loop: a random autopilot and a scripted key sequence.
"""

from .base import Player
from .random_player import RandomPlayer
from .scripted_player import ScriptedPlayer

__all__ = [
    'Player',
    'RandomPlayer',
    'ScriptedPlayer',
]
