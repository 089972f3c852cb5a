"""Configuration for the puzzle game."""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional
import json
import os


@dataclass
class PuzzleConfig:
    """Settings shared by the session, the UI and the level API."""

    # Level storage
    levels_dir: str = "levels"

    # Grid growth: level 0 uses base_grid_size, each level adds one, capped
    base_grid_size: int = 3
    max_grid_size: int = 6

    # Shuffle / image settings
    shuffle_seed: Optional[int] = None
    resize_to: Optional[int] = None  # Shorter side in pixels, None keeps the source size

    # Seconds before the surface re-renders after a swap (cosmetic only)
    swap_settle_delay: float = 0.15

    # Level API server
    host: str = "127.0.0.1"
    port: int = 3000

    verbose: bool = True

    def __post_init__(self):
        if self.base_grid_size < 1:
            raise ValueError(f"base_grid_size must be at least 1. Got: {self.base_grid_size}")
        if self.max_grid_size < self.base_grid_size:
            raise ValueError(
                f"max_grid_size ({self.max_grid_size}) must not be smaller than "
                f"base_grid_size ({self.base_grid_size})"
            )
        if self.swap_settle_delay < 0:
            raise ValueError(f"swap_settle_delay must be non-negative. Got: {self.swap_settle_delay}")

    def grid_size_for(self, level_index: int) -> int:
        """Grid size (N for an NxN board) used for the given level index."""
        if level_index < 0:
            raise ValueError(f"Level index must be non-negative. Got: {level_index}")
        return min(self.base_grid_size + level_index, self.max_grid_size)

    @classmethod
    def from_env(cls, **overrides) -> "PuzzleConfig":
        """
        Build a config from environment variables.

        Reads TILESWAP_LEVELS_DIR, TILESWAP_SEED, HOST and PORT. Keyword
        arguments take precedence over the environment.
        """
        values = {}

        if os.environ.get("TILESWAP_LEVELS_DIR"):
            values["levels_dir"] = os.environ["TILESWAP_LEVELS_DIR"]
        if os.environ.get("TILESWAP_SEED"):
            values["shuffle_seed"] = int(os.environ["TILESWAP_SEED"])
        if os.environ.get("HOST"):
            values["host"] = os.environ["HOST"]
        if os.environ.get("PORT"):
            values["port"] = int(os.environ["PORT"])

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Save config to JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> "PuzzleConfig":
        """Load config from JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls(**data)
