#!/usr/bin/env python3
"""CLI entry point for the Tile-Swap Memory Puzzle."""

import argparse
import logging
import random
import sys
from pathlib import Path

from PIL import Image

from tileswap.config import PuzzleConfig
from tileswap.errors import TileSwapError
from tileswap.grid_annotator import GridAnnotator
from tileswap.image_processor import TilePartitioner
from tileswap.levels import LevelDirectory
from tileswap.shuffle import shuffled_board


def setup_logging(verbose: bool) -> None:
    """Configure logging."""
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def cmd_levels(config: PuzzleConfig, args: argparse.Namespace) -> int:
    """Print every valid level with its assets and grid size."""
    directory = LevelDirectory(config.levels_dir)
    levels = directory.list_levels()

    for index, level_id in enumerate(levels):
        assets = directory.get_level_assets(level_id)
        grid_size = config.grid_size_for(index)
        print(f"{level_id:<12} {grid_size}x{grid_size}  image={assets.image}  audio={assets.audio}")

    print(f"{len(levels)} level(s) in {directory.root}")
    return 0


def cmd_serve(config: PuzzleConfig, args: argparse.Namespace) -> int:
    """Run the level API server."""
    from tileswap.server import run_server

    run_server(config)
    return 0


def cmd_preview(config: PuzzleConfig, args: argparse.Namespace) -> int:
    """Shuffle a level once and save the annotated board image."""
    logger = logging.getLogger(__name__)
    directory = LevelDirectory(config.levels_dir)
    levels = directory.list_levels()

    if args.level not in levels:
        logger.error(f"Unknown level: {args.level}. Available: {', '.join(levels)}")
        return 1

    level_index = levels.index(args.level)
    grid_size = args.grid_size or config.grid_size_for(level_index)
    assets = directory.get_level_assets(args.level)

    partitioner = TilePartitioner(resize_to=config.resize_to)
    tiles = partitioner.partition(directory.image_path(assets), grid_size)
    board = shuffled_board(tiles, grid_size, random.Random(config.shuffle_seed))

    annotator = GridAnnotator(grid_size)
    image = annotator.annotate_board(board.to_image(), correctness=board.correctness())

    output = Path(args.output or f"{args.level}_preview.png")
    output.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(image).save(output)

    logger.info(
        f"{args.level}: {grid_size}x{grid_size}, "
        f"{board.count_correct()}/{board.total_pieces} tiles in place"
    )
    print(f"Preview saved to: {output}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Tile-Swap Memory Puzzle - swap tiles to restore each image and unlock its audio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the levels found in ./levels
  python main.py levels

  # Serve the level API on port 8080
  python main.py --levels-dir my_levels serve --port 8080

  # Save a shuffled, annotated board for level_2
  python main.py --seed 42 preview level_2 --output previews/level_2.png

  # Play in the browser
  streamlit run streamlit_app/app.py
        """,
    )

    parser.add_argument(
        "--levels-dir", "-l", type=str, default=None,
        help="Folder with level_<n> subfolders (default: $TILESWAP_LEVELS_DIR or ./levels)",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for reproducible shuffling"
    )
    parser.add_argument(
        "--resize", type=int, default=None,
        help="Resize images so the shorter side equals this value (e.g., 600)",
    )
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress progress output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("levels", help="List available levels")

    serve_parser = subparsers.add_parser("serve", help="Run the level API server")
    serve_parser.add_argument("--host", type=str, default=None, help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", "-p", type=int, default=None, help="Port (default: $PORT or 3000)")

    preview_parser = subparsers.add_parser("preview", help="Save a shuffled board image for a level")
    preview_parser.add_argument("level", type=str, help="Level name (e.g., level_1)")
    preview_parser.add_argument(
        "--grid-size", "-g", type=int, default=None,
        help="Override the grid size (default: derived from the level's position)",
    )
    preview_parser.add_argument("--output", "-o", type=str, default=None, help="Output image path")

    args = parser.parse_args()

    setup_logging(not args.quiet)
    logger = logging.getLogger(__name__)

    try:
        config = PuzzleConfig.from_env(
            levels_dir=args.levels_dir,
            shuffle_seed=args.seed,
            resize_to=args.resize,
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            verbose=not args.quiet,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    commands = {
        "levels": cmd_levels,
        "serve": cmd_serve,
        "preview": cmd_preview,
    }

    try:
        sys.exit(commands[args.command](config, args))
    except TileSwapError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
