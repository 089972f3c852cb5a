"""Per-level play statistics."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class LevelResult:
    """Result of one solved level."""

    level_id: str
    level_index: int
    grid_size: int
    swaps: int
    start_time: str
    end_time: str
    duration_seconds: float

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "level_id": self.level_id,
            "level_index": self.level_index,
            "grid_size": self.grid_size,
            "swaps": self.swaps,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_seconds": self.duration_seconds,
        }


@dataclass
class MetricsTracker:
    """Tracks swaps for the level in progress and results of solved ones."""

    results: list[LevelResult] = field(default_factory=list)
    swaps: int = 0
    _level_id: Optional[str] = None
    _level_index: int = 0
    _grid_size: int = 0
    _start_time: Optional[datetime] = None

    def start_level(self, level_id: str, level_index: int, grid_size: int) -> None:
        """Begin counting for a newly loaded level."""
        self.swaps = 0
        self._level_id = level_id
        self._level_index = level_index
        self._grid_size = grid_size
        self._start_time = datetime.now()

    def record_swap(self) -> None:
        self.swaps += 1

    def finish_level(self) -> LevelResult:
        """Close the level in progress and store its result."""
        if self._level_id is None or self._start_time is None:
            raise ValueError("No level in progress")

        end_time = datetime.now()
        result = LevelResult(
            level_id=self._level_id,
            level_index=self._level_index,
            grid_size=self._grid_size,
            swaps=self.swaps,
            start_time=self._start_time.isoformat(),
            end_time=end_time.isoformat(),
            duration_seconds=(end_time - self._start_time).total_seconds(),
        )
        self.results.append(result)
        return result

    def reset(self) -> None:
        """Forget every result, e.g. when restarting from the first level."""
        self.results = []
        self.swaps = 0
        self._level_id = None
        self._start_time = None

    @property
    def total_swaps(self) -> int:
        return sum(r.swaps for r in self.results)

    @property
    def total_duration(self) -> float:
        return sum(r.duration_seconds for r in self.results)
