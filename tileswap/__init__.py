"""Tile-Swap Memory Puzzle - swap image tiles back into place to unlock each level's audio."""

from .config import PuzzleConfig
from .levels import LevelDirectory, LevelAssets
from .image_processor import TilePartitioner, Tile
from .board import Board
from .shuffle import shuffle_tiles
from .audio import AudioHandle, AudioPlayer
from .presentation import PresentationSurface, SessionSnapshot, SessionStatus
from .session import PuzzleSession, TileAction

__version__ = "0.1.0"

__all__ = [
    "PuzzleConfig",
    "LevelDirectory",
    "LevelAssets",
    "TilePartitioner",
    "Tile",
    "Board",
    "shuffle_tiles",
    "AudioHandle",
    "AudioPlayer",
    "PresentationSurface",
    "SessionSnapshot",
    "SessionStatus",
    "PuzzleSession",
    "TileAction",
]
