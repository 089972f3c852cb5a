"""Image slicing into puzzle tiles and reassembly of boards."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageLoadError


@dataclass(frozen=True, eq=False)
class Tile:
    """One piece of the puzzle image."""

    origin: int  # Row-major index of the slot this tile belongs in
    content: np.ndarray


class TilePartitioner:
    """Loads level images and cuts them into an NxN grid of tiles."""

    def __init__(self, resize_to: Optional[int | tuple[int, int]] = None):
        """
        Initialize the partitioner.

        Args:
            resize_to: Optional resize target. Can be:
                - int: Resize so the shorter side equals this value (maintains aspect ratio)
                - tuple[int, int]: Resize to exact (width, height)
                - None: No resizing (default)
        """
        self.resize_to = resize_to

    def load_image(self, image_path: str | Path) -> np.ndarray:
        """
        Load an image as an RGB array, resized if configured.

        Raises:
            ImageLoadError: If the file is missing or cannot be decoded
        """
        try:
            with Image.open(image_path) as img:
                img = img.convert("RGB")
                if self.resize_to is not None:
                    img = self._resize_image(img)
                return np.array(img)
        except (OSError, UnidentifiedImageError) as e:
            raise ImageLoadError(f"Failed to load image {image_path}: {e}") from e

    def _resize_image(self, img: Image.Image) -> Image.Image:
        if isinstance(self.resize_to, int):
            w, h = img.size
            if w < h:
                new_w = self.resize_to
                new_h = int(h * (self.resize_to / w))
            else:
                new_h = self.resize_to
                new_w = int(w * (self.resize_to / h))
            return img.resize((new_w, new_h), Image.Resampling.LANCZOS)
        return img.resize(self.resize_to, Image.Resampling.LANCZOS)

    @staticmethod
    def crop_to_grid(image: np.ndarray, grid_size: int) -> np.ndarray:
        """Center-crop an image so both sides divide evenly by grid_size."""
        h, w = image.shape[:2]
        new_h = (h // grid_size) * grid_size
        new_w = (w // grid_size) * grid_size
        if new_h == 0 or new_w == 0:
            raise ImageLoadError(
                f"Image of size {w}x{h} is too small for a {grid_size}x{grid_size} grid"
            )

        start_h = (h - new_h) // 2
        start_w = (w - new_w) // 2
        return image[start_h:start_h + new_h, start_w:start_w + new_w]

    def slice_image(self, image: np.ndarray, grid_size: int) -> list[Tile]:
        """
        Slice an image into row-major tiles.

        Args:
            image: RGB array (H, W, 3)
            grid_size: Number of rows and columns

        Returns:
            grid_size ** 2 tiles with origins 0..grid_size**2 - 1
        """
        if grid_size < 1:
            raise ValueError(f"Grid size must be at least 1. Got: {grid_size}")

        image = self.crop_to_grid(image, grid_size)
        piece_h = image.shape[0] // grid_size
        piece_w = image.shape[1] // grid_size

        tiles = []
        for row in range(grid_size):
            for col in range(grid_size):
                y1 = row * piece_h
                x1 = col * piece_w
                piece = image[y1:y1 + piece_h, x1:x1 + piece_w].copy()
                tiles.append(Tile(origin=row * grid_size + col, content=piece))
        return tiles

    def partition(self, image_path: str | Path, grid_size: int) -> list[Tile]:
        """Load an image file and slice it into tiles."""
        return self.slice_image(self.load_image(image_path), grid_size)


def compose(tiles: Sequence[Tile], grid_size: int) -> np.ndarray:
    """
    Reassemble tiles, in their current order, into one image.

    Args:
        tiles: Tiles in board order (row-major)
        grid_size: Number of rows and columns

    Returns:
        Numpy array of the arranged board
    """
    if len(tiles) != grid_size ** 2:
        raise ValueError(f"Expected {grid_size ** 2} tiles, got {len(tiles)}")

    piece_h, piece_w = tiles[0].content.shape[:2]
    result = np.zeros((piece_h * grid_size, piece_w * grid_size, 3), dtype=np.uint8)

    for position, tile in enumerate(tiles):
        row, col = divmod(position, grid_size)
        y1 = row * piece_h
        x1 = col * piece_w
        result[y1:y1 + piece_h, x1:x1 + piece_w] = tile.content

    return result
