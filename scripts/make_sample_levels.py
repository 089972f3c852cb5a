"""Create a few sample levels (image + tone) for trying the game locally."""

import argparse
import sys
import wave
from pathlib import Path

import numpy as np
from PIL import Image

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tileswap.levels import LevelDirectory

# One base colour and one tone frequency per sample level
SAMPLES = [
    ((220, 80, 60), 440.0),
    ((60, 140, 220), 523.25),
    ((90, 190, 110), 659.25),
    ((200, 160, 40), 783.99),
]


def create_sample_image(path: Path, color: tuple[int, int, int], size: int = 480) -> None:
    """Create a test image with a gradient, corner boxes and a centre disc."""
    rows = np.linspace(0.3, 1.0, size)[:, None]
    cols = np.linspace(1.0, 0.5, size)[None, :]
    shade = rows * cols

    img = np.zeros((size, size, 3), dtype=np.uint8)
    for channel in range(3):
        img[:, :, channel] = (color[channel] * shade).astype(np.uint8)

    # Corner boxes make misplaced tiles easy to spot
    box = size // 6
    img[box // 2:box // 2 + box, box // 2:box // 2 + box] = [255, 255, 255]
    img[-box - box // 2:-box // 2, -box - box // 2:-box // 2] = [0, 0, 0]

    yy, xx = np.mgrid[:size, :size]
    center = size // 2
    disc = (yy - center) ** 2 + (xx - center) ** 2 < (size // 5) ** 2
    img[disc] = [255 - c for c in color]

    Image.fromarray(img).save(path)


def create_tone(path: Path, frequency: float, seconds: float = 2.0, sample_rate: int = 22050) -> None:
    """Write a mono 16-bit WAV sine tone with a short fade in and out."""
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    signal = np.sin(2 * np.pi * frequency * t)

    fade = int(0.05 * sample_rate)
    envelope = np.ones_like(signal)
    envelope[:fade] = np.linspace(0, 1, fade)
    envelope[-fade:] = np.linspace(1, 0, fade)

    samples = (signal * envelope * 0.4 * 32767).astype(np.int16)

    with wave.open(str(path), "wb") as f:
        f.setnchannels(1)
        f.setsampwidth(2)
        f.setframerate(sample_rate)
        f.writeframes(samples.tobytes())


def main():
    parser = argparse.ArgumentParser(description="Create sample puzzle levels")
    parser.add_argument("--output", "-o", type=str, default="levels", help="Levels folder (default: levels)")
    parser.add_argument("--count", "-n", type=int, default=3, help=f"Number of levels (max {len(SAMPLES)})")
    args = parser.parse_args()

    root = Path(args.output)
    for index, (color, frequency) in enumerate(SAMPLES[:args.count], start=1):
        folder = root / f"level_{index}"
        folder.mkdir(parents=True, exist_ok=True)
        create_sample_image(folder / "image.png", color)
        create_tone(folder / "audio.wav", frequency)
        print(f"Created {folder}")

    levels = LevelDirectory(root).list_levels()
    print(f"{len(levels)} level(s) ready: {', '.join(levels)}")


if __name__ == "__main__":
    main()
