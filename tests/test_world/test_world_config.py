"""Tests for WorldConfig."""

from world import WorldConfig


class TestWorldConfig:
    """Test WorldConfig dataclass."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = WorldConfig()

        assert config.tick_ms == 16
        assert config.event_log_capacity == 50
        assert config.bounds_min == (-10.0, -10.0)
        assert config.bounds_max == (10.0, 10.0)
        assert config.initial_creatures == 3
        assert config.is_valid()

    def test_validate_invalid_tick(self) -> None:
        errors = WorldConfig(tick_ms=0).validate()
        assert "tick_ms must be positive" in errors

    def test_validate_invalid_capacity(self) -> None:
        errors = WorldConfig(event_log_capacity=0).validate()
        assert "event_log_capacity must be >= 1" in errors

    def test_validate_inverted_bounds(self) -> None:
        errors = WorldConfig(bounds_min=(0.0, 0.0), bounds_max=(5.0, -1.0)).validate()
        assert "bounds_max must be greater than bounds_min on both axes" in errors

    def test_validate_empty_visuals(self) -> None:
        config = WorldConfig(creature_visuals=())
        assert "creature_visuals cannot be empty" in config.validate()
        assert not config.is_valid()

    def test_from_env(self, monkeypatch) -> None:
        """Test loading from environment variables."""
        monkeypatch.setenv("CRITTERS_TICK_MS", "33")
        monkeypatch.setenv("CRITTERS_BOUNDS_MAX", "20,15")
        monkeypatch.setenv("CRITTERS_INITIAL_CREATURES", "5")
        monkeypatch.setenv("CRITTERS_CREATURE_VISUALS", "red, blue,")

        config = WorldConfig.from_env()

        assert config.tick_ms == 33.0
        assert config.bounds_max == (20.0, 15.0)
        assert config.bounds_min == (-10.0, -10.0)
        assert config.initial_creatures == 5
        assert config.creature_visuals == ("red", "blue")

    def test_from_env_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("CRITTERS_CREATURE_VISUALS", raising=False)
        monkeypatch.delenv("CRITTERS_TICK_MS", raising=False)
        config = WorldConfig.from_env()
        assert config.creature_visuals == ("blob_green", "blob_pink", "blob_blue")
        assert config.tick_ms == 16.0

    def test_from_dict(self) -> None:
        config = WorldConfig.from_dict({"initial_creatures": 0, "unknown": 1})
        assert config.initial_creatures == 0
