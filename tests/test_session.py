"""Tests for the puzzle session state machine."""

import random
from unittest.mock import Mock

import pytest

from conftest import make_level
from tileswap.audio import AudioHandle, AudioPlayer
from tileswap.config import PuzzleConfig
from tileswap.errors import PlaybackBlocked
from tileswap.levels import LevelDirectory
from tileswap.presentation import RecordingSurface, SessionStatus, immediate_scheduler
from tileswap.session import PuzzleSession, TileAction


def arrange(session: PuzzleSession, origins: list[int]) -> None:
    """Reorder the session's board so position i holds origin origins[i]."""
    board = session.board
    for position, origin in enumerate(origins):
        current = board.origins.index(origin)
        if current != position:
            board.swap(current, position)
    assert board.origins == origins


@pytest.fixture
def player():
    return Mock(spec=AudioPlayer)


@pytest.fixture
def audio_factory(player):
    """Audio factory that records every handle it builds."""
    return Mock(side_effect=lambda path: AudioHandle(path, player))


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def make_session(levels_dir, audio_factory, surface):
    def _make(root=None, **kwargs):
        config = PuzzleConfig(levels_dir=str(root or levels_dir), shuffle_seed=7, verbose=False)
        kwargs.setdefault("audio_factory", audio_factory)
        kwargs.setdefault("surface", surface)
        kwargs.setdefault("scheduler", immediate_scheduler)
        return PuzzleSession(config, **kwargs)

    return _make


@pytest.fixture
def ready_session(make_session):
    """Session with level_1 loaded."""
    session = make_session()
    assert session.start()
    assert session.load_level(0)
    return session


def solve_with_one_swap(session: PuzzleSession) -> TileAction:
    """Leave exactly two tiles out of place, then swap them back via the session."""
    n = session.grid_size ** 2
    origins = list(range(n))
    origins[1], origins[n - 1] = origins[n - 1], origins[1]
    arrange(session, origins)

    assert session.select_tile(1) == TileAction.ARMED
    return session.select_tile(n - 1)


class TestStart:
    """Tests for fetching the level list."""

    def test_start(self, make_session, surface):
        """Test that start lists levels and shows the welcome screen."""
        session = make_session()

        assert session.start()

        assert session.status == SessionStatus.WELCOME
        assert session.levels == ["level_1", "level_2"]
        assert [s.status for s in surface.snapshots] == [SessionStatus.LOADING, SessionStatus.WELCOME]

    def test_no_levels(self, make_session, tmp_path):
        """Test that an empty folder leads to the error screen."""
        session = make_session(root=tmp_path / "empty")

        assert not session.start()

        assert session.status == SessionStatus.ERROR
        assert "No levels" in session.error or "not found" in session.error

    def test_retry_after_levels_added(self, make_session, tmp_path):
        """Test that retry re-fetches the list once levels exist."""
        root = tmp_path / "later"
        session = make_session(root=root)
        session.start()

        make_level(root, "level_1")

        assert session.retry()
        assert session.status == SessionStatus.WELCOME
        assert session.error is None

    def test_select_ignored_before_level(self, make_session):
        session = make_session()
        session.start()

        assert session.select_tile(0) == TileAction.IGNORED


class TestLoadLevel:
    """Tests for loading levels."""

    def test_load_first_level(self, ready_session, audio_factory):
        """Test the state after a successful load."""
        session = ready_session

        assert session.status == SessionStatus.READY
        assert session.grid_size == 3
        assert len(session.board) == 9
        assert sorted(session.board.origins) == list(range(9))
        assert not session.board.is_solved()
        assert session.selection is None
        assert not session.solved
        assert session.audio is None
        assert not audio_factory.called

    def test_grid_grows_with_level(self, ready_session):
        ready_session.load_level(1)

        assert ready_session.grid_size == 4
        assert len(ready_session.board) == 16

    def test_index_out_of_range(self, ready_session):
        with pytest.raises(ValueError):
            ready_session.load_level(2)

    def test_failed_load_keeps_previous_level(self, make_session, levels_dir):
        """Test that a broken image leaves the previous level untouched."""
        (levels_dir / "level_2" / "image.png").write_bytes(b"garbage")
        session = make_session()
        session.start()
        session.load_level(0)
        board = session.board
        origins = board.origins

        assert not session.load_level(1)

        assert session.status == SessionStatus.ERROR
        assert "level_2" in session.error
        assert session.level_index == 0
        assert session.grid_size == 3
        assert session.board is board
        assert board.origins == origins

    def test_retry_reloads_failed_level(self, make_session, levels_dir):
        """Test that retry repeats the load that failed."""
        image = levels_dir / "level_2" / "image.png"
        good = image.read_bytes()
        image.write_bytes(b"garbage")
        session = make_session()
        session.start()
        session.load_level(0)
        session.load_level(1)

        image.write_bytes(good)

        assert session.retry()
        assert session.status == SessionStatus.READY
        assert session.level_index == 1

    def test_seeded_shuffle_reproducible(self, make_session):
        a = make_session()
        b = make_session()
        for s in (a, b):
            s.start()
            s.load_level(0)

        assert a.board.origins == b.board.origins

    def test_progress(self, ready_session):
        snapshot = ready_session.snapshot()

        assert snapshot.progress == (0, 2)
        assert snapshot.progress_text == "Memory 1 of 2"
        assert snapshot.level_id == "level_1"


class TestSelectTile:
    """Tests for tile selection and swapping."""

    def test_select_arms(self, ready_session):
        assert ready_session.select_tile(4) == TileAction.ARMED
        assert ready_session.selection == 4

    def test_select_same_twice_deselects(self, ready_session):
        """Test that selecting the same position twice disarms it without a swap."""
        before = ready_session.board.origins

        ready_session.select_tile(2)
        action = ready_session.select_tile(2)

        assert action == TileAction.DESELECTED
        assert ready_session.selection is None
        assert ready_session.board.origins == before
        assert ready_session.metrics.swaps == 0

    def test_select_two_swaps(self, ready_session):
        arrange(ready_session, [8, 7, 6, 5, 4, 3, 2, 1, 0])

        ready_session.select_tile(0)
        action = ready_session.select_tile(8)

        assert action == TileAction.SWAPPED
        assert ready_session.board.origins == [0, 7, 6, 5, 4, 3, 2, 1, 8]
        assert ready_session.selection is None
        assert ready_session.metrics.swaps == 1

    def test_swap_twice_restores(self, ready_session):
        arrange(ready_session, [8, 7, 6, 5, 4, 3, 2, 1, 0])
        before = ready_session.board.origins

        for _ in range(2):
            ready_session.select_tile(0)
            ready_session.select_tile(5)

        assert ready_session.board.origins == before

    def test_out_of_range(self, ready_session):
        with pytest.raises(ValueError):
            ready_session.select_tile(9)

    def test_swap_render_is_deferred(self, make_session):
        """Test that a swap re-renders through the scheduler with the settle delay."""
        calls = []
        surface = RecordingSurface()
        session = make_session(surface=surface, scheduler=lambda delay, cb: calls.append((delay, cb)))
        session.start()
        session.load_level(0)
        arrange(session, [8, 7, 6, 5, 4, 3, 2, 1, 0])

        session.select_tile(0)
        rendered = len(surface.snapshots)
        session.select_tile(8)

        assert len(surface.snapshots) == rendered
        assert len(calls) == 1
        assert calls[0][0] == session.config.swap_settle_delay

        calls[0][1]()

        assert surface.last.tiles[0].origin == 0
        assert surface.last.tiles[0].correct
        assert surface.last.selection is None


class TestSolved:
    """Tests for solving and the audio reveal."""

    def test_solving_creates_audio_once(self, ready_session, audio_factory, player, levels_dir):
        """Test that the final swap solves the board and builds exactly one audio handle."""
        assert not ready_session.solved
        assert ready_session.audio is None

        action = solve_with_one_swap(ready_session)

        assert action == TileAction.SOLVED
        assert ready_session.solved
        assert ready_session.status == SessionStatus.SOLVED
        audio_factory.assert_called_once_with(levels_dir / "level_1" / "audio.wav")
        player.play.assert_called_once_with(ready_session.audio)

    def test_board_frozen_after_solve(self, ready_session):
        solve_with_one_swap(ready_session)
        origins = ready_session.board.origins

        assert ready_session.select_tile(0) == TileAction.IGNORED
        assert ready_session.select_tile(1) == TileAction.IGNORED
        assert ready_session.board.origins == origins
        assert ready_session.selection is None

    def test_snapshot_after_solve(self, ready_session, surface):
        solve_with_one_swap(ready_session)

        snapshot = surface.last

        assert snapshot.status == SessionStatus.SOLVED
        assert snapshot.solved
        assert snapshot.audio is ready_session.audio
        assert snapshot.correct_count == 9
        assert snapshot.swaps == 1

    def test_metrics_recorded(self, ready_session):
        solve_with_one_swap(ready_session)

        assert len(ready_session.metrics.results) == 1
        assert ready_session.metrics.results[0].swaps == 1

    def test_single_tile_level_is_solved_on_load(self, levels_dir, audio_factory, player):
        """Test that a 1x1 board enters the solved state without any swap."""
        config = PuzzleConfig(
            levels_dir=str(levels_dir), base_grid_size=1, max_grid_size=1, verbose=False
        )
        session = PuzzleSession(
            config, audio_factory=audio_factory, scheduler=immediate_scheduler
        )
        session.start()

        assert session.load_level(0)

        assert session.board.is_solved()
        assert session.solved
        assert session.status == SessionStatus.SOLVED
        audio_factory.assert_called_once_with(levels_dir / "level_1" / "audio.wav")
        player.play.assert_called_once_with(session.audio)
        assert session.select_tile(0) == TileAction.IGNORED
        assert session.advance()
        assert session.level_index == 1

    def test_unreadable_audio_is_not_fatal(self, ready_session, player):
        """Test that an audio read error falls back to the replay button."""
        player.play.side_effect = OSError("file vanished")

        action = solve_with_one_swap(ready_session)

        assert action == TileAction.SOLVED
        assert ready_session.status == SessionStatus.SOLVED
        assert ready_session.snapshot().playback_blocked

    def test_playback_blocked_is_not_fatal(self, ready_session, player):
        """Test that refused autoplay leaves the reveal screen with replay available."""
        player.play.side_effect = PlaybackBlocked("autoplay disabled")

        solve_with_one_swap(ready_session)

        assert ready_session.status == SessionStatus.SOLVED
        assert ready_session.snapshot().playback_blocked
        assert ready_session.audio is not None

        player.play.side_effect = None
        assert ready_session.replay()
        assert not ready_session.snapshot().playback_blocked


class TestReplay:
    """Tests for replaying the reward audio."""

    def test_replay_before_solved(self, ready_session, audio_factory):
        """Test that replay does nothing and builds no handle before solving."""
        assert not ready_session.replay()

        assert ready_session.audio is None
        assert not audio_factory.called

    def test_replay_before_start(self, make_session, audio_factory):
        assert not make_session().replay()
        assert not audio_factory.called

    def test_replay_after_solved(self, ready_session, audio_factory, player):
        solve_with_one_swap(ready_session)
        handle = ready_session.audio

        assert ready_session.replay()

        assert player.play.call_count == 2
        assert ready_session.audio is handle
        assert audio_factory.call_count == 1
        assert handle.play_count == 2


class TestAdvance:
    """Tests for moving between levels."""

    def test_advance_requires_solved(self, ready_session):
        assert not ready_session.advance()
        assert ready_session.level_index == 0

    def test_advance_to_next_level(self, ready_session, player):
        solve_with_one_swap(ready_session)
        handle = ready_session.audio

        assert ready_session.advance()

        assert ready_session.status == SessionStatus.READY
        assert ready_session.level_index == 1
        assert ready_session.grid_size == 4
        assert not ready_session.solved
        assert ready_session.selection is None
        assert ready_session.audio is None
        player.stop.assert_called_with(handle)

    def test_advance_on_last_level_completes(self, ready_session, audio_factory):
        """Test that advancing from the final level ends the game instead of loading."""
        solve_with_one_swap(ready_session)
        ready_session.advance()
        solve_with_one_swap(ready_session)

        assert ready_session.advance()

        assert ready_session.status == SessionStatus.COMPLETED
        assert ready_session.board is None
        assert ready_session.audio is None
        assert ready_session.select_tile(0) == TileAction.IGNORED
        assert not ready_session.replay()
        assert audio_factory.call_count == 2

    def test_restart_after_completion(self, ready_session):
        solve_with_one_swap(ready_session)
        ready_session.advance()
        solve_with_one_swap(ready_session)
        ready_session.advance()

        assert ready_session.restart()

        assert ready_session.status == SessionStatus.READY
        assert ready_session.level_index == 0
        assert ready_session.grid_size == 3
        assert ready_session.metrics.results == []

    def test_failed_restart_keeps_results(self, ready_session, levels_dir):
        """Test that a restart whose load fails does not lose the finished levels."""
        solve_with_one_swap(ready_session)
        ready_session.advance()
        solve_with_one_swap(ready_session)
        ready_session.advance()
        (levels_dir / "level_1" / "image.png").write_bytes(b"garbage")

        assert not ready_session.restart()

        assert ready_session.status == SessionStatus.ERROR
        assert [r.level_id for r in ready_session.metrics.results] == ["level_1", "level_2"]

    def test_restart_mid_level(self, ready_session):
        ready_session.load_level(1)
        ready_session.select_tile(3)

        assert ready_session.restart()

        assert ready_session.level_index == 0
        assert ready_session.selection is None

    def test_restart_without_start(self, make_session):
        """Test that restart fetches the level list when needed."""
        session = make_session()

        assert session.restart()

        assert session.status == SessionStatus.READY
        assert session.levels == ["level_1", "level_2"]


class TestDefaults:
    """Tests for the default collaborators."""

    def test_default_collaborators(self, levels_dir):
        """Test a session built from config alone."""
        config = PuzzleConfig(levels_dir=str(levels_dir), verbose=False)
        session = PuzzleSession(config, rng=random.Random(1))

        assert isinstance(session.directory, LevelDirectory)
        assert session.restart()
        assert session.status == SessionStatus.READY

    def test_default_audio_blocked(self, levels_dir):
        """Test that without a player the reveal degrades to blocked playback."""
        config = PuzzleConfig(levels_dir=str(levels_dir), verbose=False)
        session = PuzzleSession(config)
        session.restart()

        solve_with_one_swap(session)

        assert session.status == SessionStatus.SOLVED
        assert session.snapshot().playback_blocked
