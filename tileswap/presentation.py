"""Interface between a puzzle session and whatever draws it."""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from .audio import AudioHandle

Scheduler = Callable[[float, Callable[[], None]], None]


class SessionStatus(str, Enum):
    """Screens a session can be on."""

    IDLE = "idle"
    LOADING = "loading"
    WELCOME = "welcome"
    READY = "ready"
    SOLVED = "solved"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class TileView:
    """What the surface needs to draw one board position."""

    position: int
    origin: int
    content: Any
    correct: bool


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session at one moment."""

    status: SessionStatus
    level_index: int
    level_count: int
    level_id: Optional[str] = None
    grid_size: int = 0
    tiles: tuple[TileView, ...] = field(default_factory=tuple)
    selection: Optional[int] = None
    solved: bool = False
    audio: Optional[AudioHandle] = None
    playback_blocked: bool = False
    swaps: int = 0
    error: Optional[str] = None

    @property
    def progress(self) -> tuple[int, int]:
        """(level_index, level_count)"""
        return self.level_index, self.level_count

    @property
    def progress_text(self) -> str:
        return f"Memory {self.level_index + 1} of {self.level_count}"

    @property
    def is_last_level(self) -> bool:
        return self.level_index >= self.level_count - 1

    @property
    def correct_count(self) -> int:
        return sum(1 for tile in self.tiles if tile.correct)


class PresentationSurface(ABC):
    """Abstract renderer driven by a session."""

    @abstractmethod
    def render(self, snapshot: SessionSnapshot) -> None:
        """Draw the given snapshot."""
        pass


class RecordingSurface(PresentationSurface):
    """Keeps every snapshot it is asked to render."""

    def __init__(self):
        self.snapshots: list[SessionSnapshot] = []

    def render(self, snapshot: SessionSnapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def last(self) -> Optional[SessionSnapshot]:
        return self.snapshots[-1] if self.snapshots else None


def immediate_scheduler(delay: float, callback: Callable[[], None]) -> None:
    """Run the callback right away, ignoring the delay."""
    callback()


def blocking_scheduler(delay: float, callback: Callable[[], None]) -> None:
    """Sleep for the delay on the calling thread, then run the callback."""
    time.sleep(delay)
    callback()


def timer_scheduler(delay: float, callback: Callable[[], None]) -> None:
    """Run the callback on a daemon timer thread after the delay."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
