"""Puzzle session: level progression, tile selection and the audio reveal."""

import logging
import random
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .audio import AudioHandle, AudioPlayer, resolve_audio
from .board import Board
from .config import PuzzleConfig
from .errors import LevelLoadFailed, NoLevelsFound, PlaybackBlocked, TileSwapError
from .image_processor import TilePartitioner
from .levels import LevelAssets, LevelDirectory
from .metrics import MetricsTracker
from .presentation import (
    PresentationSurface,
    Scheduler,
    SessionSnapshot,
    SessionStatus,
    TileView,
    timer_scheduler,
)
from .shuffle import shuffled_board

logger = logging.getLogger(__name__)

AudioFactory = Callable[[Path], AudioHandle]


class TileAction(str, Enum):
    """What a tile activation did."""

    ARMED = "armed"
    DESELECTED = "deselected"
    SWAPPED = "swapped"
    SOLVED = "solved"
    IGNORED = "ignored"


class PuzzleSession:
    """
    State machine for one player working through the levels.

    A session is created explicitly and handed to the presentation layer;
    the surface forwards input through select_tile, replay, advance,
    restart and retry, and is re-rendered after every transition.
    """

    def __init__(
        self,
        config: PuzzleConfig,
        directory: Optional[LevelDirectory] = None,
        partitioner: Optional[TilePartitioner] = None,
        surface: Optional[PresentationSurface] = None,
        audio_player: Optional[AudioPlayer] = None,
        audio_factory: Optional[AudioFactory] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the session.

        Args:
            config: Puzzle configuration
            directory: Level lookup; defaults to config.levels_dir on disk
            partitioner: Image slicer; defaults to one honouring config.resize_to
            surface: Renderer notified after each transition
            audio_player: Playback backend handed to new audio handles
            audio_factory: Builds the reward audio handle from a file path.
                Called only when a level is solved.
            scheduler: Runs the delayed re-render after a swap
            rng: Random source for shuffling; seeded from config.shuffle_seed if omitted
        """
        self.config = config
        self.directory = directory or LevelDirectory(config.levels_dir)
        self.partitioner = partitioner or TilePartitioner(resize_to=config.resize_to)
        self.surface = surface
        self._audio_factory = audio_factory or (lambda path: resolve_audio(path, audio_player))
        self._scheduler = scheduler or timer_scheduler
        self._rng = rng or random.Random(config.shuffle_seed)

        self.metrics = MetricsTracker()

        self._status = SessionStatus.IDLE
        self._error: Optional[str] = None
        self._levels: list[str] = []
        self._level_index = 0
        self._pending_index = 0
        self._level: Optional[LevelAssets] = None
        self._grid_size = 0
        self._board: Optional[Board] = None
        self._selection: Optional[int] = None
        self._solved = False
        self._audio: Optional[AudioHandle] = None
        self._playback_blocked = False

    # Read access

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def levels(self) -> list[str]:
        return list(self._levels)

    @property
    def level_count(self) -> int:
        return len(self._levels)

    @property
    def level_index(self) -> int:
        return self._level_index

    @property
    def level(self) -> Optional[LevelAssets]:
        return self._level

    @property
    def grid_size(self) -> int:
        return self._grid_size

    @property
    def board(self) -> Optional[Board]:
        return self._board

    @property
    def selection(self) -> Optional[int]:
        return self._selection

    @property
    def solved(self) -> bool:
        return self._solved

    @property
    def audio(self) -> Optional[AudioHandle]:
        return self._audio

    def snapshot(self) -> SessionSnapshot:
        """Capture the current state for rendering."""
        tiles: tuple[TileView, ...] = ()
        if self._board is not None:
            tiles = tuple(
                TileView(position=i, origin=tile.origin, content=tile.content, correct=tile.origin == i)
                for i, tile in enumerate(self._board)
            )

        return SessionSnapshot(
            status=self._status,
            level_index=self._level_index,
            level_count=len(self._levels),
            level_id=self._level.level if self._level else None,
            grid_size=self._grid_size,
            tiles=tiles,
            selection=self._selection,
            solved=self._solved,
            audio=self._audio,
            playback_blocked=self._playback_blocked,
            swaps=self.metrics.swaps,
            error=self._error,
        )

    def _render(self) -> None:
        if self.surface is not None:
            self.surface.render(self.snapshot())

    def _render_later(self) -> None:
        if self.surface is not None:
            self._scheduler(self.config.swap_settle_delay, self._render)

    def _fail(self, message: str) -> None:
        self._status = SessionStatus.ERROR
        self._error = message
        self._render()

    # Transitions

    def start(self) -> bool:
        """
        Fetch the level list and move to the welcome screen.

        Returns:
            True if at least one level is available
        """
        self._status = SessionStatus.LOADING
        self._error = None
        self._render()

        try:
            levels = self.directory.list_levels()
        except NoLevelsFound as e:
            logger.warning(f"No levels available: {e}")
            self._fail(str(e))
            return False
        except (TileSwapError, OSError) as e:
            logger.warning(f"Failed to read levels: {e}")
            self._fail(f"Failed to initialize game: {e}")
            return False

        self._levels = levels
        self._status = SessionStatus.WELCOME
        if self.config.verbose:
            logger.info(f"Found {len(levels)} levels")
        self._render()
        return True

    def load_level(self, level_index: int) -> bool:
        """
        Load, slice and shuffle a level.

        Either every part of the new level is committed or, on failure, the
        session moves to the error screen with its previous level intact.

        Args:
            level_index: Index into the level list

        Returns:
            True if the level is ready to play
        """
        if not 0 <= level_index < len(self._levels):
            raise ValueError(
                f"Level index {level_index} out of range for {len(self._levels)} levels"
            )

        self._pending_index = level_index
        self._status = SessionStatus.LOADING
        self._error = None
        if self._audio is not None:
            self._audio.stop()
        self._render()

        level_id = self._levels[level_index]
        try:
            assets = self.directory.get_level_assets(level_id)
            grid_size = self.config.grid_size_for(level_index)
            tiles = self.partitioner.partition(self.directory.image_path(assets), grid_size)
            board = shuffled_board(tiles, grid_size, self._rng)
        except (TileSwapError, OSError) as e:
            failure = LevelLoadFailed(level_id, e)
            logger.warning(str(failure))
            self._fail(str(failure))
            return False

        self._level_index = level_index
        self._level = assets
        self._grid_size = grid_size
        self._board = board
        self._selection = None
        self._solved = False
        self._audio = None
        self._playback_blocked = False
        self.metrics.start_level(level_id, level_index, grid_size)
        self._status = SessionStatus.READY

        if self.config.verbose:
            logger.info(
                f"Loaded {level_id} ({level_index + 1}/{len(self._levels)}): "
                f"{grid_size}x{grid_size}, {board.count_correct()} tiles already in place"
            )

        if board.is_solved():
            # A single tile has no swap left to make
            self._enter_solved()

        self._render()
        return True

    def select_tile(self, position: int) -> TileAction:
        """
        Handle activation of the tile at a board position.

        The first activation arms a tile, activating it again disarms it, and
        activating a different tile swaps the two.

        Raises:
            ValueError: If position is outside the board
        """
        if self._status != SessionStatus.READY or self._board is None:
            logger.debug(f"Ignoring tile {position} while {self._status.value}")
            return TileAction.IGNORED

        if not 0 <= position < len(self._board):
            raise ValueError(
                f"Position {position} out of bounds for a {self._grid_size}x{self._grid_size} board"
            )

        if self._selection is None:
            self._selection = position
            self._render()
            return TileAction.ARMED

        if self._selection == position:
            self._selection = None
            self._render()
            return TileAction.DESELECTED

        other = self._selection
        self._board.swap(other, position)
        self._selection = None
        self.metrics.record_swap()
        logger.debug(f"Swapped {other} <-> {position}")

        if self._board.is_solved():
            self._enter_solved()
            self._render_later()
            return TileAction.SOLVED

        self._render_later()
        return TileAction.SWAPPED

    def _enter_solved(self) -> None:
        self._solved = True
        self._status = SessionStatus.SOLVED
        result = self.metrics.finish_level()

        if self.config.verbose:
            logger.info(
                f"Solved {result.level_id} in {result.swaps} swaps "
                f"({result.duration_seconds:.1f}s)"
            )

        self._audio = self._audio_factory(self.directory.audio_path(self._level))
        self._start_playback()

    def _start_playback(self) -> None:
        try:
            self._audio.play()
            self._playback_blocked = False
        except PlaybackBlocked as e:
            logger.info(f"Auto-play prevented, user can click replay: {e}")
            self._playback_blocked = True
        except OSError as e:
            logger.warning(f"Could not play {self._audio.path.name}: {e}")
            self._playback_blocked = True

    def replay(self) -> bool:
        """
        Restart the reward audio from the beginning.

        Returns:
            False (and does nothing) unless the level is solved
        """
        if self._status != SessionStatus.SOLVED or self._audio is None:
            return False

        self._start_playback()
        self._render()
        return True

    def advance(self) -> bool:
        """
        Move on from a solved level to the next one, or to the final screen.

        Returns:
            False if the current level is not solved or the next level failed to load
        """
        if self._status != SessionStatus.SOLVED:
            return False

        if self._audio is not None:
            self._audio.stop()

        if self._level_index >= len(self._levels) - 1:
            self._status = SessionStatus.COMPLETED
            self._board = None
            self._selection = None
            self._audio = None
            if self.config.verbose:
                logger.info(
                    f"All {len(self._levels)} levels complete, "
                    f"{self.metrics.total_swaps} swaps in total"
                )
            self._render()
            return True

        return self.load_level(self._level_index + 1)

    def restart(self) -> bool:
        """Go back to the first level, fetching the level list if it is missing."""
        if not self._levels and not self.start():
            return False

        history = self.metrics.results
        self.metrics.reset()
        if not self.load_level(0):
            self.metrics.results = history
            return False
        return True

    def retry(self) -> bool:
        """Repeat whatever failed: the level list fetch or the last level load."""
        if not self._levels:
            return self.start()
        return self.load_level(self._pending_index)
