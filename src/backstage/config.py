"""Backstage configuration management.

Handles persistent settings stored in ~/.backstage/config.json
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional


# Default configuration values
DEFAULT_THEME = "textual-dark"
DEFAULT_USER_ID = "user1"
DEFAULT_TAB = "for_you"  # for_you, following, trending
DEFAULT_RECENT_LIMIT = 4
DEFAULT_AVATAR_LIMIT = 3
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class BackstageConfig:
    """Backstage application configuration."""

    # Seed dataset (None = bundled sample data)
    data_path: Optional[str] = None

    # Session identity
    current_user_id: str = DEFAULT_USER_ID

    # Feed and dashboard preferences
    default_tab: str = DEFAULT_TAB
    recent_limit: int = DEFAULT_RECENT_LIMIT
    avatar_limit: int = DEFAULT_AVATAR_LIMIT

    # Appearance
    theme: str = DEFAULT_THEME

    # Diagnostics
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the path to the config file."""
        return Path.home() / ".backstage" / "config.json"

    @classmethod
    def load(cls) -> "BackstageConfig":
        """Load configuration from file, or return defaults if not found."""
        config_path = cls.get_config_path()

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                # Only use known fields to avoid issues with old config versions
                known_fields = {f.name for f in cls.__dataclass_fields__.values()}
                filtered_data = {k: v for k, v in data.items() if k in known_fields}
                return cls(**filtered_data).drop_invalid()
            except (json.JSONDecodeError, TypeError, ValueError, AttributeError):
                # Invalid config, return defaults
                pass

        return cls()

    def save(self) -> None:
        """Save configuration to file."""
        config_path = self.get_config_path()

        # Ensure directory exists
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self.data_path = None
        self.current_user_id = DEFAULT_USER_ID
        self.default_tab = DEFAULT_TAB
        self.recent_limit = DEFAULT_RECENT_LIMIT
        self.avatar_limit = DEFAULT_AVATAR_LIMIT
        self.theme = DEFAULT_THEME
        self.log_level = DEFAULT_LOG_LEVEL

    def drop_invalid(self) -> "BackstageConfig":
        """Replace out-of-range values (e.g. from a hand-edited file) with defaults."""
        if self.default_tab not in FEED_TAB_OPTIONS:
            self.default_tab = DEFAULT_TAB
        if self.theme not in THEME_NAMES:
            self.theme = DEFAULT_THEME
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVEL_OPTIONS:
            self.log_level = DEFAULT_LOG_LEVEL
        for key in INT_FIELDS:
            value = getattr(self, key)
            if not isinstance(value, int) or value < 0:
                setattr(self, key, getattr(BackstageConfig, key))
        return self

    def set_value(self, key: str, value: str) -> None:
        """Set a field from its string form (as typed on the command line).

        Raises:
            KeyError: if ``key`` is not a config field
            ValueError: if ``value`` does not convert to the field's type
        """
        if key not in self.__dataclass_fields__:
            raise KeyError(key)
        if key in INT_FIELDS:
            converted = int(value)
            if converted < 0:
                raise ValueError(f"{key} must be >= 0")
            setattr(self, key, converted)
        elif key == "data_path":
            setattr(self, key, value or None)
        elif key == "default_tab" and value not in FEED_TAB_OPTIONS:
            raise ValueError(f"default_tab must be one of: {', '.join(FEED_TAB_OPTIONS)}")
        elif key == "theme" and value not in THEME_NAMES:
            raise ValueError(f"theme must be one of: {', '.join(THEME_NAMES)}")
        elif key == "log_level" and value.upper() not in LOG_LEVEL_OPTIONS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVEL_OPTIONS)}")
        elif key == "log_level":
            setattr(self, key, value.upper())
        else:
            setattr(self, key, value)


INT_FIELDS = {"recent_limit", "avatar_limit"}

# Available options for settings
FEED_TAB_OPTIONS = ["for_you", "following", "trending"]

LOG_LEVEL_OPTIONS = ["DEBUG", "INFO", "WARNING", "ERROR"]

AVAILABLE_THEMES = [
    ("textual-dark", "Textual Dark"),
    ("textual-light", "Textual Light"),
    ("nord", "Nord"),
    ("gruvbox", "Gruvbox"),
    ("catppuccin-mocha", "Catppuccin Mocha"),
    ("dracula", "Dracula"),
    ("tokyo-night", "Tokyo Night"),
    ("monokai", "Monokai"),
]

THEME_NAMES = [name for name, _ in AVAILABLE_THEMES]
