"""
Audio sink for game events.

A SoundBoard holds named sounds and guarantees at most one of them is
playing: starting a sound stops whatever was playing before.
"""

import logging
from typing import Dict, Optional

from domain.constants import SOUND_COLLECT, SOUND_DEATH

logger = logging.getLogger(__name__)


class Sound:
    """
    In-memory sound handle. It records play/stop calls instead of decoding
    audio, so the engine can run anywhere.
    """

    def __init__(self, source: Optional[str] = None):
        self.source = source
        self.play_count = 0
        self._playing = False

    def play(self):
        self._playing = True
        self.play_count += 1

    def stop(self):
        self._playing = False

    def is_playing(self) -> bool:
        return self._playing

    def __repr__(self):
        return f"<Sound source={self.source!r} playing={self._playing}>"


class SoundBoard:
    def __init__(self):
        self._sounds: Dict[str, Sound] = {}

    def add_sound(self, name: str, sound) -> None:
        for method in ("play", "stop", "is_playing"):
            if not callable(getattr(sound, method, None)):
                raise ValueError(f"Sound {name!r} does not provide {method}()")
        self._sounds[name] = sound

    def get(self, name: str) -> Optional[Sound]:
        return self._sounds.get(name)

    def play(self, name: str) -> None:
        sound = self._sounds.get(name)
        if sound is None:
            logger.warning(f"Unknown sound {name!r}; ignoring")
            return
        self.stop_all()
        logger.debug(f"Playing sound {name!r}")
        sound.play()

    def playing(self) -> Optional[str]:
        """Name of the sound currently playing, if any."""
        for name, sound in self._sounds.items():
            if sound.is_playing():
                return name
        return None

    def stop_all(self) -> None:
        for sound in self._sounds.values():
            if sound.is_playing():
                sound.stop()


def default_sound_board() -> SoundBoard:
    """A board with the two sounds the game triggers."""
    board = SoundBoard()
    board.add_sound(SOUND_COLLECT, Sound("sounds/collect.mp3"))
    board.add_sound(SOUND_DEATH, Sound("sounds/death.mp3"))
    return board
