"""Shared fixtures: temporary images and level folders."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image


def make_quadrant_image(size: int = 60) -> np.ndarray:
    """Image with four distinct coloured quadrants."""
    half = size // 2
    img = np.zeros((size, size, 3), dtype=np.uint8)
    img[:half, :half] = [255, 0, 0]      # Top-left: red
    img[:half, half:] = [0, 255, 0]      # Top-right: green
    img[half:, :half] = [0, 0, 255]      # Bottom-left: blue
    img[half:, half:] = [255, 255, 0]    # Bottom-right: yellow
    return img


def make_level(root: Path, name: str, image: str = "image.png", audio: str = "audio.wav") -> Path:
    """Create a level folder with an image and a placeholder audio file."""
    folder = root / name
    folder.mkdir(parents=True, exist_ok=True)
    if image:
        Image.fromarray(make_quadrant_image()).save(folder / image)
    if audio:
        (folder / audio).write_bytes(b"RIFF0000WAVEfmt ")
    return folder


@pytest.fixture
def sample_image_path(tmp_path):
    """Create a temporary 64x64 test image."""
    path = tmp_path / "sample.png"
    Image.fromarray(make_quadrant_image(64)).save(path)
    return path


@pytest.fixture
def levels_dir(tmp_path):
    """A levels folder holding level_1 and level_2."""
    root = tmp_path / "levels"
    make_level(root, "level_1")
    make_level(root, "level_2")
    return root
