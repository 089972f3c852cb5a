"""Discovery of level folders and their image/audio assets."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import LevelNotFound, NoLevelsFound

logger = logging.getLogger(__name__)

LEVEL_NAME_PATTERN = re.compile(r"^level_(\d+)$")
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
AUDIO_EXTENSIONS = {".mp3", ".wav", ".ogg", ".m4a"}


@dataclass(frozen=True)
class LevelAssets:
    """Filenames of the assets belonging to one level."""

    level: str
    image: str
    audio: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"level": self.level, "image": self.image, "audio": self.audio}


def level_number(level_id: str) -> Optional[int]:
    """Numeric suffix of a level folder name, or None if the name is not a level name."""
    match = LEVEL_NAME_PATTERN.match(level_id)
    return int(match.group(1)) if match else None


def _first_with_extension(files: list[str], extensions: set[str]) -> Optional[str]:
    for name in sorted(files):
        if Path(name).suffix.lower() in extensions:
            return name
    return None


class LevelDirectory:
    """
    Read-only view over a folder of levels.

    Each level is a subfolder named ``level_<n>`` holding at least one image
    and one audio file. Levels are ordered by ``n``.
    """

    def __init__(self, root: str | Path):
        """
        Initialize the level directory.

        Args:
            root: Folder containing the level subfolders
        """
        self.root = Path(root)

    def _files_in(self, folder: Path) -> list[str]:
        return [f.name for f in folder.iterdir() if f.is_file()]

    def _is_valid_level(self, folder: Path) -> bool:
        if not folder.is_dir() or level_number(folder.name) is None:
            return False
        files = self._files_in(folder)
        return (
            _first_with_extension(files, IMAGE_EXTENSIONS) is not None
            and _first_with_extension(files, AUDIO_EXTENSIONS) is not None
        )

    def list_levels(self) -> list[str]:
        """
        List valid level ids in play order.

        Returns:
            Level folder names sorted by their numeric suffix

        Raises:
            NoLevelsFound: If the folder is missing or holds no valid level
        """
        if not self.root.is_dir():
            raise NoLevelsFound(f"Levels directory not found: {self.root}")

        levels = [f.name for f in self.root.iterdir() if self._is_valid_level(f)]
        levels.sort(key=lambda name: (level_number(name), name))

        if not levels:
            raise NoLevelsFound(
                f"No levels found. Add level_<n> folders with an image and audio file to {self.root}"
            )

        logger.debug(f"Found {len(levels)} levels in {self.root}")
        return levels

    def get_level_assets(self, level_id: str) -> LevelAssets:
        """
        Look up the image and audio filenames of a level.

        Args:
            level_id: Level folder name (e.g., "level_1")

        Returns:
            LevelAssets for the level

        Raises:
            LevelNotFound: If the id is malformed, unknown, or lacks an asset
        """
        if level_number(level_id) is None:
            raise LevelNotFound(f"Invalid level name format: {level_id}")

        folder = self.root / level_id
        if not folder.is_dir():
            raise LevelNotFound(f"Level not found: {level_id}")

        files = self._files_in(folder)
        image = _first_with_extension(files, IMAGE_EXTENSIONS)
        audio = _first_with_extension(files, AUDIO_EXTENSIONS)

        if image is None or audio is None:
            raise LevelNotFound(f"Level {level_id} is missing required files (image or audio)")

        return LevelAssets(level=level_id, image=image, audio=audio)

    def image_path(self, assets: LevelAssets) -> Path:
        """Filesystem path of a level's image."""
        return self.root / assets.level / assets.image

    def audio_path(self, assets: LevelAssets) -> Path:
        """Filesystem path of a level's audio file."""
        return self.root / assets.level / assets.audio
