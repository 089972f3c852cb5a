"""Reward audio: lazily created handles and playback backends."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .errors import PlaybackBlocked

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".m4a": "audio/mp4",
}


class AudioPlayer(ABC):
    """Abstract playback backend."""

    @abstractmethod
    def play(self, handle: "AudioHandle") -> None:
        """
        Start playing a handle from the beginning.

        Raises:
            PlaybackBlocked: If the platform refuses to start playback
        """
        pass

    def stop(self, handle: "AudioHandle") -> None:
        """Stop playback of a handle."""
        pass


class SilentPlayer(AudioPlayer):
    """Backend for environments without audio output; every play is blocked."""

    def play(self, handle: "AudioHandle") -> None:
        raise PlaybackBlocked(f"No audio output available for {handle.path.name}")


class AudioHandle:
    """
    A playable reference to a level's audio file.

    Nothing is read from disk until the audio data is first requested.
    """

    def __init__(self, path: str | Path, player: Optional[AudioPlayer] = None):
        self.path = Path(path)
        self.player = player or SilentPlayer()
        self.play_count = 0
        self.is_playing = False
        self._data: Optional[bytes] = None

    @property
    def data(self) -> bytes:
        """Raw audio bytes, read on first access."""
        if self._data is None:
            self._data = self.path.read_bytes()
        return self._data

    @property
    def mime_type(self) -> str:
        return MIME_TYPES.get(self.path.suffix.lower(), "audio/mpeg")

    def play(self) -> None:
        """
        Play from the beginning.

        Raises:
            PlaybackBlocked: If the backend refuses playback
        """
        self.play_count += 1
        self.is_playing = False
        self.player.play(self)
        self.is_playing = True

    def stop(self) -> None:
        """Stop playback."""
        if self.is_playing:
            self.player.stop(self)
        self.is_playing = False


def resolve_audio(path: str | Path, player: Optional[AudioPlayer] = None) -> AudioHandle:
    """Create a handle for an audio file without loading it."""
    logger.debug(f"Resolving audio {path}")
    return AudioHandle(path, player)
