"""Shuffling of tiles into a playable starting arrangement."""

import random
from typing import Optional, Sequence, TypeVar

from .board import Board, is_solved
from .image_processor import Tile

T = TypeVar("T")


def fisher_yates(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a uniformly shuffled copy of items."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def count_inversions(origins: Sequence[int]) -> int:
    """Count pairs (i, j), i < j, where origins[i] > origins[j]."""
    inversions = 0
    n = len(origins)
    for i in range(n):
        for j in range(i + 1, n):
            if origins[i] > origins[j]:
                inversions += 1
    return inversions


def correct_parity(tiles: Sequence[Tile]) -> list[Tile]:
    """
    Make the inversion count of an arrangement even.

    With an odd count the first two positions are swapped; otherwise the
    arrangement is returned unchanged.
    """
    result = list(tiles)
    if len(result) < 2:
        return result

    if count_inversions([tile.origin for tile in result]) % 2 != 0:
        result[0], result[1] = result[1], result[0]
    return result


def shuffle_tiles(tiles: Sequence[Tile], rng: Optional[random.Random] = None) -> list[Tile]:
    """
    Shuffle tiles into an even-parity arrangement.

    Args:
        tiles: Tiles in solved order
        rng: Random source; a fresh unseeded one is used if omitted

    Returns:
        A permutation of tiles. With three or more tiles it is never the
        solved order. With two tiles every even arrangement is the solved
        one, so that is what comes back.
    """
    rng = rng or random.Random()

    if len(tiles) <= 1:
        return list(tiles)

    while True:
        shuffled = correct_parity(fisher_yates(tiles, rng))
        if len(shuffled) < 3 or not is_solved(shuffled):
            return shuffled


def shuffled_board(tiles: Sequence[Tile], grid_size: int, rng: Optional[random.Random] = None) -> Board:
    """Build a shuffled Board from tiles in solved order."""
    return Board(shuffle_tiles(tiles, rng), grid_size)
