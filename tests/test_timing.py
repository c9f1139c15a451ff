"""
Tests for configuration and frame timing.
"""
import pytest

from meadow.config import GameConfig, get_game_config
from meadow.internal.timing import FrameClock, clamp_delta


class TestConfig:
    """Tests for GameConfig."""

    def test_defaults(self):
        """Test the canvas size and derived snake step."""
        config = get_game_config()
        assert config["canvas_width"] == 800
        assert config["canvas_height"] == 600
        assert GameConfig().snake_step == 16

    def test_replace(self):
        """Test overriding a single value."""
        config = GameConfig().replace(snake_move_delay=0)
        assert config.snake_move_delay == 0
        assert config.bunny_speed == 2.5

    def test_invalid_initial_segments(self):
        """Test that a spawn chain longer than the max is rejected."""
        with pytest.raises(ValueError):
            GameConfig(snake_initial_segments=9, snake_max_length=8)


class TestClampDelta:
    """Tests for frame delta sanitising."""

    @pytest.mark.parametrize("delta", [-5, 500, float("nan"), float("inf"), "abc", None])
    def test_bad_deltas(self, delta):
        """Test that unusable deltas become the default."""
        assert clamp_delta(delta) == 16

    def test_good_delta(self):
        """Test that a normal delta passes through."""
        assert clamp_delta(33) == 33
        assert clamp_delta(100) == 100


class TestFrameClock:
    """Tests for the frame clock."""

    def test_ticks(self):
        """Test first tick default, normal delta, and a stall."""
        times = iter([0.0, 20.0, 500.0, 530.0])
        clock = FrameClock(now=lambda: next(times))
        assert clock.tick() == 16
        assert clock.tick() == 20
        assert clock.tick() == 16
        assert clock.tick() == 30

    def test_reset(self):
        """Test that reset starts over with the default delta."""
        times = iter([0.0, 10.0, 1000.0])
        clock = FrameClock(now=lambda: next(times))
        clock.tick()
        clock.tick()
        clock.reset()
        assert clock.tick() == 16
