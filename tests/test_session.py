"""
Tests for the level/session lifecycle.
"""
import pytest

from meadow.entities.core import Direction
from meadow.errors import LevelNotFound
from meadow.internal.math import Vector2D
from meadow.levels import LevelCatalog, LevelData
from meadow.logic.input import InputFrame
from meadow.session import GameSession, SessionEvent
from meadow.snapshot import GamePhase, MessageKind

RIGHT = InputFrame(bunny_direction=Direction.RIGHT)


def row_level(level_id, hearts=5, required=3):
    """Hearts in a row to the right of the bunny, 100px apart.

    Walking right picks them up on ticks 11, 51, 91, 131 and 171.
    """
    return LevelData(
        id=level_id,
        name=f"Row {level_id}",
        bunny_start=(50.0, 50.0),
        snake_start=(300.0, 300.0),
        water_regions=(),
        collectible_positions=tuple((100.0 + 100 * i, 50.0) for i in range(hearts)),
        required_count=required,
    )


@pytest.fixture
def session():
    catalog = LevelCatalog([row_level(1), row_level(2, hearts=3, required=3)])
    return GameSession(catalog)


@pytest.fixture
def events(session):
    received = []
    session.subscribe(received.append)
    return received


def walk_right(session, ticks):
    for _ in range(ticks):
        session.tick(16, RIGHT)


def finish_level(session):
    for _ in range(200):
        if session.phase is not GamePhase.PLAYING:
            return
        session.tick(16, RIGHT)
    raise AssertionError("level did not complete")


def count(events, kind):
    return sum(1 for e in events if e.event is kind)


class TestStartup:
    """Tests for a fresh session."""

    def test_default_session(self):
        """Test the built-in catalog starting on level 1."""
        session = GameSession()
        status = session.status()
        assert session.phase is GamePhase.PLAYING
        assert status.level_id == 1
        assert status.score == 0
        assert status.score_text == "0/3"
        assert status.message == "Level 1 - Snake: Press SPACE to bridge, then WASD to extend!"

    def test_default_snapshot(self):
        """Test the render snapshot of level 1."""
        snapshot = GameSession().snapshot()
        assert snapshot.canvas_width == 800
        assert len(snapshot.water_regions) == 2
        assert len(snapshot.collectibles) == 3
        assert snapshot.snake.length == 3
        assert not snapshot.snake.bridging
        assert snapshot.bunny.bounds.as_tuple() == (50, 50, 25, 25)

    def test_unknown_start_level(self):
        """Test that a session cannot start on a missing level."""
        with pytest.raises(LevelNotFound):
            GameSession(start_level=99)

    def test_partial_score_text(self, session):
        """Test the score text when only some items are required."""
        assert session.status().score_text == "0/3 (5 total)"


class TestCompletion:
    """Tests for reaching the required count."""

    def test_below_threshold_keeps_playing(self, session):
        """Test that two of three required items do not complete the level."""
        walk_right(session, 60)
        assert session.world.collected_count == 2
        assert session.phase is GamePhase.PLAYING

    def test_completes_exactly_once(self, session, events):
        """Test that the third item completes the level a single time."""
        walk_right(session, 91)
        assert session.world.collected_count == 3
        assert session.phase is GamePhase.LEVEL_COMPLETE

        walk_right(session, 30)
        assert session.world.collected_count == 3
        assert count(events, SessionEvent.LEVEL_COMPLETE) == 1
        assert count(events, SessionEvent.COLLECTED) == 3

        status = session.status()
        assert status.score == 3
        assert status.message_kind is MessageKind.SUCCESS
        assert status.message == "Level 1 Complete! 3/3 hearts collected! Press R to continue"

    def test_perfect_message(self, session):
        """Test the message when every item was collected."""
        finish_level(session)
        session.advance_level()
        finish_level(session)
        assert session.status().message.startswith("Level 2 Complete! Perfect score: 3/3 hearts!")

    def test_collection_counts_once(self):
        """Test that standing on an item scores it once."""
        level = LevelData(
            id=1,
            name="Stand",
            bunny_start=(50.0, 50.0),
            snake_start=(300.0, 300.0),
            water_regions=(),
            collectible_positions=((55.0, 55.0), (500.0, 500.0)),
            required_count=2,
        )
        session = GameSession(LevelCatalog([level]))
        for _ in range(5):
            session.tick(16)
        assert session.score == 1
        assert session.world.collected_count == 1


class TestPause:
    """Tests for pausing."""

    def test_pause_suspends_updates(self, session, events):
        """Test that nothing moves while paused."""
        assert session.toggle_pause()
        assert session.phase is GamePhase.PAUSED
        assert session.status().message == "Game Paused - Press P to resume"

        walk_right(session, 5)
        assert session.world.bunny.position == Vector2D(50, 50)
        assert session.elapsed == 0

        assert session.toggle_pause()
        assert session.phase is GamePhase.PLAYING
        assert session.status().message == "Level 1 - Work together to collect all hearts!"
        assert count(events, SessionEvent.PAUSED) == 1
        assert count(events, SessionEvent.RESUMED) == 1

    def test_cannot_pause_completed_level(self, session):
        """Test that pause does nothing outside play."""
        finish_level(session)
        assert not session.toggle_pause()
        assert session.phase is GamePhase.LEVEL_COMPLETE


class TestProgression:
    """Tests for advancing, finishing and restarting."""

    def test_advance_requires_completion(self, session):
        """Test that advancing mid-level is refused."""
        assert not session.advance_level()
        assert session.level_id == 1

    def test_advance_keeps_score(self, session):
        """Test moving on to the next level."""
        finish_level(session)
        assert session.advance_level()
        assert session.level_id == 2
        assert session.phase is GamePhase.PLAYING
        assert session.score == 3
        assert session.world.collected_count == 0
        assert session.world.bunny.position == Vector2D(50, 50)

    def test_game_complete_and_restart(self, session, events):
        """Test the end of the catalog and starting over."""
        finish_level(session)
        session.advance_level()
        finish_level(session)
        assert session.advance_level()
        assert session.phase is GamePhase.GAME_COMPLETE
        assert session.score == 6
        assert count(events, SessionEvent.GAME_COMPLETE) == 1

        assert not session.advance_level()
        assert not session.reset_current_level()
        session.tick(16, RIGHT)
        assert session.phase is GamePhase.GAME_COMPLETE

        assert session.restart_session()
        assert session.phase is GamePhase.PLAYING
        assert session.level_id == 1
        assert session.score == 0
        assert session.elapsed == 0


class TestReset:
    """Tests for resetting the current level."""

    def test_reset_rebuilds_level(self, session):
        """Test that a reset restores items and characters."""
        session.tick(16, InputFrame(bridge_held=True))
        walk_right(session, 40)
        assert session.reset_current_level()

        world = session.world
        assert world.collected_count == 0
        assert world.bunny.position == Vector2D(50, 50)
        assert world.snake.length == 3
        assert not world.snake.bridge_mode
        assert session.phase is GamePhase.PLAYING

    def test_reset_takes_back_attempt_score(self, session):
        """Test that only the current attempt's items leave the score."""
        walk_right(session, 60)
        assert session.score == 2
        session.reset_current_level()
        assert session.score == 0

        finish_level(session)
        session.advance_level()
        walk_right(session, 60)
        assert session.score == 5
        session.reset_current_level()
        assert session.score == 3

    def test_reset_after_completion_keeps_score(self, session):
        """Test that resetting a completed level keeps its banked items."""
        finish_level(session)
        assert session.score == 3
        assert session.reset_current_level()
        assert session.phase is GamePhase.PLAYING
        assert session.world.collected_count == 0
        assert session.score == 3
        assert session.status().level_score == 0

    def test_reload_after_completion_matches_reset(self, session):
        """Test that reloading a completed level banks its items like a reset."""
        finish_level(session)
        assert session.load_level(1)
        assert session.score == 3
        finish_level(session)
        assert session.score == 6

        session.reset_current_level()
        finish_level(session)
        assert session.score == 9


class TestLoadLevel:
    """Tests for loading levels directly."""

    def test_missing_level_changes_nothing(self, session, events):
        """Test that a failed load leaves the session as it was."""
        walk_right(session, 60)
        world = session.world
        assert not session.load_level(99)

        assert session.world is world
        assert session.level_id == 1
        assert session.score == 2
        assert session.phase is GamePhase.PLAYING
        assert session.message_kind is MessageKind.ERROR
        assert session.message == "Failed to load level 99"
        assert count(events, SessionEvent.LOAD_FAILED) == 1

    def test_abandoned_attempt(self, session):
        """Test that leaving a level unfinished drops its items from the score."""
        walk_right(session, 60)
        assert session.load_level(2)
        assert session.level_id == 2
        assert session.score == 0


class TestTickAndInput:
    """Tests for tick bookkeeping and global keys."""

    def test_delta_is_clamped(self, session):
        """Test that wild deltas count as a default frame."""
        session.tick(1000)
        session.tick(-3)
        assert session.elapsed == 32

    def test_pause_key(self, session):
        """Test the pause key edge."""
        session.apply_global_input(InputFrame(pause_pressed=True))
        assert session.phase is GamePhase.PAUSED
        session.apply_global_input(InputFrame(pause_pressed=True))
        assert session.phase is GamePhase.PLAYING

    def test_action_key_per_phase(self, session, events):
        """Test reset, continue and restart on the action key."""
        walk_right(session, 20)
        session.apply_global_input(InputFrame(action_pressed=True))
        assert count(events, SessionEvent.LEVEL_RESET) == 1
        assert session.world.collected_count == 0

        finish_level(session)
        session.apply_global_input(InputFrame(action_pressed=True))
        assert session.level_id == 2

        finish_level(session)
        session.apply_global_input(InputFrame(action_pressed=True))
        assert session.phase is GamePhase.GAME_COMPLETE
        session.apply_global_input(InputFrame(action_pressed=True))
        assert session.phase is GamePhase.PLAYING
        assert session.level_id == 1

    def test_phase_diagram(self, session):
        """Test the exported phase machine."""
        source = session.phase_diagram().source
        assert "playing -> paused" in source
        assert "level_complete -> game_complete" in source

    def test_unsubscribe(self, session):
        """Test that an unsubscribed listener hears nothing more."""
        received = []
        unsubscribe = session.subscribe(received.append)
        session.toggle_pause()
        unsubscribe()
        session.toggle_pause()
        assert len(received) == 1
