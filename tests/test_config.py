"""Tests for persistent configuration."""

import json
from pathlib import Path

import pytest

from backstage.config import BackstageConfig


class TestBackstageConfig:
    """Tests for loading, saving and editing settings."""

    def test_defaults_when_missing(self) -> None:
        """Test defaults are used when no config file exists."""
        config = BackstageConfig.load()
        assert config.data_path is None
        assert config.current_user_id == "user1"
        assert config.default_tab == "for_you"
        assert config.recent_limit == 4
        assert config.avatar_limit == 3

    def test_save_and_load(self, isolated_config: Path) -> None:
        """Test saved settings are read back."""
        config = BackstageConfig(current_user_id="user3", recent_limit=6)
        config.save()
        assert isolated_config.exists()
        loaded = BackstageConfig.load()
        assert loaded.current_user_id == "user3"
        assert loaded.recent_limit == 6

    def test_unknown_fields_ignored(self, isolated_config: Path) -> None:
        """Test fields from older config versions are skipped."""
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(json.dumps({"theme": "nord", "legacy": True}))
        assert BackstageConfig.load().theme == "nord"

    def test_invalid_file_gives_defaults(self, isolated_config: Path) -> None:
        """Test a corrupt file falls back to defaults."""
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("{not json")
        assert BackstageConfig.load() == BackstageConfig()

    def test_out_of_range_values_replaced(self, isolated_config: Path) -> None:
        """Test hand-edited bad values fall back to their defaults on load."""
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(json.dumps({
            "default_tab": "popular",
            "theme": "no-such-theme",
            "log_level": "loud",
            "recent_limit": -2,
            "avatar_limit": "three",
            "current_user_id": "user2",
        }))
        config = BackstageConfig.load()
        assert config.default_tab == "for_you"
        assert config.theme == "textual-dark"
        assert config.log_level == "WARNING"
        assert config.recent_limit == 4
        assert config.avatar_limit == 3
        assert config.current_user_id == "user2"

    def test_reset(self) -> None:
        """Test reset restores every default."""
        config = BackstageConfig(data_path="seed.yaml", theme="nord", log_level="DEBUG")
        config.reset()
        assert config == BackstageConfig()


class TestSetValue:
    """Tests for setting values from strings."""

    def test_int_field(self) -> None:
        """Test integer settings are converted."""
        config = BackstageConfig()
        config.set_value("recent_limit", "8")
        assert config.recent_limit == 8

    def test_negative_int(self) -> None:
        """Test negative limits are rejected."""
        with pytest.raises(ValueError):
            BackstageConfig().set_value("avatar_limit", "-1")

    def test_not_an_int(self) -> None:
        """Test non-numeric limits are rejected."""
        with pytest.raises(ValueError):
            BackstageConfig().set_value("avatar_limit", "many")

    def test_tab(self) -> None:
        """Test default_tab accepts only known feed tabs."""
        config = BackstageConfig()
        config.set_value("default_tab", "trending")
        assert config.default_tab == "trending"
        with pytest.raises(ValueError):
            config.set_value("default_tab", "popular")

    def test_theme(self) -> None:
        """Test theme accepts only available themes."""
        config = BackstageConfig()
        config.set_value("theme", "dracula")
        assert config.theme == "dracula"
        with pytest.raises(ValueError, match="theme must be one of"):
            config.set_value("theme", "no-such-theme")
        assert config.theme == "dracula"

    def test_log_level_uppercased(self) -> None:
        """Test log levels are stored upper-case."""
        config = BackstageConfig()
        config.set_value("log_level", "debug")
        assert config.log_level == "DEBUG"

    def test_empty_data_path_clears(self) -> None:
        """Test an empty data_path goes back to the sample data."""
        config = BackstageConfig(data_path="seed.yaml")
        config.set_value("data_path", "")
        assert config.data_path is None

    def test_unknown_key(self) -> None:
        """Test unknown settings raise KeyError."""
        with pytest.raises(KeyError):
            BackstageConfig().set_value("colour", "red")
