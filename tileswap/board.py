"""Board of tiles: current arrangement, swaps and solved detection."""

from typing import Sequence

from .image_processor import Tile, compose


def is_solved(tiles: Sequence[Tile]) -> bool:
    """True iff every tile sits in the slot matching its origin."""
    return all(tile.origin == position for position, tile in enumerate(tiles))


class Board:
    """
    An ordered arrangement of N*N tiles.

    Position in the board is the tile's current slot. The origins across
    the board always form a permutation of 0..N*N-1.
    """

    def __init__(self, tiles: Sequence[Tile], grid_size: int):
        """
        Initialize the board.

        Args:
            tiles: Tiles in their current order
            grid_size: Number of rows and columns

        Raises:
            ValueError: If the tiles are not a permutation of 0..grid_size**2 - 1
        """
        origins = sorted(tile.origin for tile in tiles)
        if origins != list(range(grid_size ** 2)):
            raise ValueError(
                f"Tiles do not form a permutation of 0..{grid_size ** 2 - 1}: {origins}"
            )

        self.grid_size = grid_size
        self._tiles: list[Tile] = list(tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def __getitem__(self, position: int) -> Tile:
        return self._tiles[position]

    def __iter__(self):
        return iter(self._tiles)

    @property
    def tiles(self) -> tuple[Tile, ...]:
        return tuple(self._tiles)

    @property
    def origins(self) -> list[int]:
        """Origin of the tile at each position."""
        return [tile.origin for tile in self._tiles]

    @property
    def total_pieces(self) -> int:
        return self.grid_size ** 2

    def _check_position(self, position: int) -> None:
        if not 0 <= position < len(self._tiles):
            raise ValueError(
                f"Position {position} out of bounds for a {self.grid_size}x{self.grid_size} board"
            )

    def swap(self, position_a: int, position_b: int) -> None:
        """
        Exchange the tiles at two positions.

        Raises:
            ValueError: If either position is out of bounds
        """
        self._check_position(position_a)
        self._check_position(position_b)
        self._tiles[position_a], self._tiles[position_b] = \
            self._tiles[position_b], self._tiles[position_a]

    def correctness(self) -> list[bool]:
        """Correct-slot flag for every position."""
        return [tile.origin == position for position, tile in enumerate(self._tiles)]

    def count_correct(self) -> int:
        """Count how many tiles are in their correct position."""
        return sum(self.correctness())

    def is_solved(self) -> bool:
        """Check if the board is completely solved."""
        return is_solved(self._tiles)

    def to_image(self):
        """Render the current arrangement as one image array."""
        return compose(self._tiles, self.grid_size)
