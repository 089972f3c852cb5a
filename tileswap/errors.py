"""Exceptions raised by the tile-swap puzzle components."""

from typing import Optional


class TileSwapError(Exception):
    """Base class for puzzle errors."""


class LevelNotFound(TileSwapError):
    """A level id is unknown, malformed, or missing a required asset."""


class NoLevelsFound(LevelNotFound):
    """The level directory is missing or holds no valid levels."""


class ImageLoadError(TileSwapError):
    """A level image could not be read or decoded."""


class LevelLoadFailed(TileSwapError):
    """Loading a specific level failed."""

    def __init__(self, level_id: Optional[str], cause: Exception):
        self.level_id = level_id
        self.cause = cause
        super().__init__(f"Failed to load level {level_id}: {cause}")


class PlaybackBlocked(TileSwapError):
    """The platform declined to start audio playback."""
