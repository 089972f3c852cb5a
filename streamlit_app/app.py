#!/usr/bin/env python3
"""Streamlit app for playing the tile-swap memory puzzle."""

import sys
from pathlib import Path
from typing import Optional

import streamlit as st

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tileswap.audio import AudioHandle, AudioPlayer
from tileswap.config import PuzzleConfig
from tileswap.errors import PlaybackBlocked
from tileswap.grid_annotator import GridAnnotator
from tileswap.presentation import (
    PresentationSurface,
    SessionSnapshot,
    SessionStatus,
    blocking_scheduler,
)
from tileswap.session import PuzzleSession

# Page config
st.set_page_config(
    page_title="Memory Puzzle",
    page_icon="🧩",
    layout="centered",
)

PROJECT_ROOT = Path(__file__).parent.parent


class StreamlitSurface(PresentationSurface):
    """Holds the latest snapshot; the script run draws it."""

    def __init__(self):
        self.last: Optional[SessionSnapshot] = None

    def render(self, snapshot: SessionSnapshot) -> None:
        self.last = snapshot


class StreamlitAudioPlayer(AudioPlayer):
    """Marks a handle for autoplay on the next script run."""

    def __init__(self):
        self.autoplay = False

    def play(self, handle: AudioHandle) -> None:
        try:
            handle.data
        except OSError as e:
            raise PlaybackBlocked(f"Could not read {handle.path.name}: {e}") from e
        self.autoplay = True

    def stop(self, handle: AudioHandle) -> None:
        self.autoplay = False


def create_session() -> PuzzleSession:
    """Build a session wired to this app's surface and audio player."""
    levels_dir = PuzzleConfig.from_env().levels_dir
    if not Path(levels_dir).is_absolute():
        levels_dir = str(PROJECT_ROOT / levels_dir)

    config = PuzzleConfig.from_env(levels_dir=levels_dir, resize_to=600)
    session = PuzzleSession(
        config,
        surface=StreamlitSurface(),
        audio_player=st.session_state.audio_player,
        scheduler=blocking_scheduler,
    )
    session.start()
    return session


def initialize_session_state():
    """Initialize session state variables."""
    if "audio_player" not in st.session_state:
        st.session_state.audio_player = StreamlitAudioPlayer()
    if "session" not in st.session_state:
        st.session_state.session = create_session()


def current_snapshot(session: PuzzleSession) -> SessionSnapshot:
    surface = session.surface
    if isinstance(surface, StreamlitSurface) and surface.last is not None:
        return surface.last
    return session.snapshot()


def hint_text(snapshot: SessionSnapshot) -> str:
    if snapshot.selection is not None:
        return "Now tap another tile to swap"
    return "Tap two tiles to swap them"


def render_loading():
    st.info("Loading...")


def render_error(session: PuzzleSession, snapshot: SessionSnapshot):
    st.error(snapshot.error or "Something went wrong.")
    st.button("🔄 Try Again", type="primary", on_click=session.retry, use_container_width=True)


def render_welcome(session: PuzzleSession, snapshot: SessionSnapshot):
    st.markdown(
        f"""
        ### Welcome!

        There are **{snapshot.level_count}** memories waiting for you.
        Each one is a picture cut into tiles. Tap two tiles to swap them and
        put the picture back together to unlock its sound.
        """
    )
    st.button("▶️ Start", type="primary", on_click=session.restart, use_container_width=True)


def render_board(session: PuzzleSession, snapshot: SessionSnapshot):
    st.caption(snapshot.progress_text)
    st.markdown(f"**{hint_text(snapshot)}**")

    annotator = GridAnnotator(snapshot.grid_size)
    interactive = snapshot.status == SessionStatus.READY

    for row in range(snapshot.grid_size):
        columns = st.columns(snapshot.grid_size, gap="small")
        for col, column in enumerate(columns):
            tile = snapshot.tiles[row * snapshot.grid_size + col]
            selected = snapshot.selection == tile.position
            with column:
                st.image(
                    annotator.annotate_tile(tile.content, correct=tile.correct, selected=selected),
                    use_container_width=True,
                )
                st.button(
                    "●" if selected else "○",
                    key=f"tile_{snapshot.level_id}_{tile.position}",
                    on_click=session.select_tile,
                    args=(tile.position,),
                    disabled=not interactive,
                    use_container_width=True,
                )

    st.caption(
        f"{snapshot.correct_count}/{len(snapshot.tiles)} tiles in place · {snapshot.swaps} swaps"
    )


def render_completion(session: PuzzleSession, snapshot: SessionSnapshot):
    st.success(f"🎉 Memory restored in {snapshot.swaps} swaps!")
    st.caption(snapshot.progress_text)

    st.image(session.board.to_image(), use_container_width=True)

    player: StreamlitAudioPlayer = st.session_state.audio_player
    if snapshot.audio is not None:
        if snapshot.playback_blocked:
            st.warning("Could not play the audio automatically. Use Replay to listen.")
        else:
            st.audio(snapshot.audio.data, format=snapshot.audio.mime_type, autoplay=player.autoplay)
            player.autoplay = False

    col_replay, col_next = st.columns(2)
    with col_replay:
        st.button("🔁 Replay", on_click=session.replay, use_container_width=True)
    with col_next:
        label = "Finish" if snapshot.is_last_level else "Next Memory"
        st.button(label, type="primary", on_click=session.advance, use_container_width=True)


def render_final(session: PuzzleSession):
    st.balloons()
    st.markdown("### 💝 All memories restored!")

    results = session.metrics.results
    if results:
        st.caption(
            f"{session.metrics.total_swaps} swaps in {session.metrics.total_duration:.0f}s overall"
        )
        with st.expander("📜 Your Journey", expanded=False):
            for result in results:
                st.markdown(
                    f"**{result.level_id}** ({result.grid_size}×{result.grid_size}): "
                    f"{result.swaps} swaps in {result.duration_seconds:.0f}s"
                )

    st.button("🔄 Start Over", type="primary", on_click=session.restart, use_container_width=True)


def main():
    """Main app entry point."""
    initialize_session_state()
    session: PuzzleSession = st.session_state.session

    st.title("🧩 Memory Puzzle")

    snapshot = current_snapshot(session)

    if snapshot.status in (SessionStatus.IDLE, SessionStatus.LOADING):
        render_loading()
    elif snapshot.status == SessionStatus.ERROR:
        render_error(session, snapshot)
    elif snapshot.status == SessionStatus.WELCOME:
        render_welcome(session, snapshot)
    elif snapshot.status == SessionStatus.READY:
        render_board(session, snapshot)
    elif snapshot.status == SessionStatus.SOLVED:
        render_completion(session, snapshot)
    elif snapshot.status == SessionStatus.COMPLETED:
        render_final(session)


if __name__ == "__main__":
    main()
