"""
Tests for level data and the level catalog.
"""
import pytest

from meadow.errors import LevelDataError, LevelNotFound
from meadow.internal.math import Rect
from meadow.levels import DEFAULT_LEVELS, LevelCatalog, LevelData


def level_dict(**overrides):
    data = {
        "id": 7,
        "name": "Test",
        "bunnyStart": [10, 10],
        "snakeStart": [60, 60],
        "water": [{"x": 100, "y": 100, "width": 50, "height": 50}],
        "hearts": [{"x": 200, "y": 200}, {"x": 300, "y": 300}],
    }
    data.update(overrides)
    return data


class TestLevelData:
    """Tests for parsing hand-authored level dicts."""

    def test_parse(self):
        """Test the fields read from a level dict."""
        level = LevelData.from_dict(level_dict(requiredHearts=1, tips=["go"]))
        assert level.id == 7
        assert level.bunny_start == (10.0, 10.0)
        assert level.water_regions == (Rect(100, 100, 50, 50),)
        assert level.collectible_positions == ((200.0, 200.0), (300.0, 300.0))
        assert level.required_count == 1
        assert level.tips == ("go",)

    def test_required_defaults_to_total(self):
        """Test that a missing required count means all collectibles."""
        level = LevelData.from_dict(level_dict())
        assert level.required_count == level.total_count == 2

    def test_required_above_total(self):
        """Test that requiring more than exist is rejected."""
        with pytest.raises(LevelDataError):
            LevelData.from_dict(level_dict(requiredHearts=3))

    def test_missing_key(self):
        """Test that a missing start position is rejected."""
        data = level_dict()
        del data["bunnyStart"]
        with pytest.raises(LevelDataError):
            LevelData.from_dict(data)

    def test_no_collectibles(self):
        """Test that a level needs something to collect."""
        with pytest.raises(LevelDataError):
            LevelData.from_dict(level_dict(hearts=[]))

    def test_bunny_starts_in_water(self):
        """Test that a bunny start overlapping water is rejected."""
        with pytest.raises(LevelDataError, match="in water"):
            LevelData.from_dict(level_dict(bunnyStart=[90, 90]))

    def test_starts_off_canvas(self):
        """Test that both starts must fit inside the canvas."""
        with pytest.raises(LevelDataError, match="Bunny start"):
            LevelData.from_dict(level_dict(bunnyStart=[790, 10]))
        with pytest.raises(LevelDataError, match="Snake start"):
            LevelData.from_dict(level_dict(snakeStart=[60, -5]))

    def test_snake_may_start_in_water(self):
        """Test that only the bunny start is checked against water."""
        level = LevelData.from_dict(level_dict(snakeStart=[110, 110]))
        assert level.snake_start == (110.0, 110.0)


class TestLevelCatalog:
    """Tests for catalog lookups."""

    def test_default_catalog(self):
        """Test the four built-in levels."""
        catalog = LevelCatalog.default()
        assert len(catalog) == len(DEFAULT_LEVELS) == 4
        assert catalog.ids == [1, 2, 3, 4]
        assert catalog.first_id == 1

    def test_partial_requirement_level(self):
        """Test that level 3 needs 4 of its 6 collectibles."""
        level = LevelCatalog.default().require_level(3)
        assert level.required_count == 4
        assert level.total_count == 6

    def test_missing_level(self):
        """Test lookups for an unknown id."""
        catalog = LevelCatalog.default()
        assert catalog.get_level(99) is None
        assert 99 not in catalog
        with pytest.raises(LevelNotFound) as excinfo:
            catalog.require_level(99)
        assert excinfo.value.level_id == 99

    def test_next_id(self):
        """Test stepping through the catalog."""
        catalog = LevelCatalog.default()
        assert catalog.next_id(1) == 2
        assert catalog.next_id(4) is None

    def test_duplicate_ids(self):
        """Test that two levels with one id are rejected."""
        with pytest.raises(LevelDataError):
            LevelCatalog.from_dicts([level_dict(), level_dict()])

    def test_empty_catalog(self):
        """Test that a catalog needs at least one level."""
        with pytest.raises(LevelDataError):
            LevelCatalog([])

    def test_iterates_in_id_order(self):
        """Test iteration order."""
        catalog = LevelCatalog.from_dicts([level_dict(id=5), level_dict(id=2)])
        assert [level.id for level in catalog] == [2, 5]
