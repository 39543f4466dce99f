"""Configuration for Super Calc.

Settings live in <home>/config.json. Every key is optional:

    {
        "history_limit": 100,
        "default_tip_percentage": 15,
        "default_split_count": 1,
        "default_theme": "light",
        "log_level": "WARNING"
    }
"""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

HOME_ENV_VAR = "SUPER_CALC_HOME"
DEFAULT_HOME = "~/.super-calc"

TIP_PERCENTAGE_RANGE = (0, 30)
SPLIT_COUNT_RANGE = (1, 20)
THEMES = ("dark", "light")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CalcConfig:
    """Runtime settings."""

    history_limit: int = 100
    default_tip_percentage: int = 15
    default_split_count: int = 1
    default_theme: str = "light"
    log_level: str = "WARNING"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CalcConfig":
        """Build a config, keeping the default for any invalid value."""
        defaults = cls()

        history_limit = data.get("history_limit", defaults.history_limit)
        if not _is_int(history_limit) or history_limit < 1:
            history_limit = defaults.history_limit

        tip = data.get("default_tip_percentage", defaults.default_tip_percentage)
        if not _is_int(tip) or not TIP_PERCENTAGE_RANGE[0] <= tip <= TIP_PERCENTAGE_RANGE[1]:
            tip = defaults.default_tip_percentage

        split = data.get("default_split_count", defaults.default_split_count)
        if not _is_int(split) or not SPLIT_COUNT_RANGE[0] <= split <= SPLIT_COUNT_RANGE[1]:
            split = defaults.default_split_count

        theme = data.get("default_theme", defaults.default_theme)
        if theme not in THEMES:
            theme = defaults.default_theme

        log_level = str(data.get("log_level", defaults.log_level)).upper()
        if log_level not in LOG_LEVELS:
            log_level = defaults.log_level

        return cls(
            history_limit=history_limit,
            default_tip_percentage=tip,
            default_split_count=split,
            default_theme=theme,
            log_level=log_level,
        )


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def resolve_home(home: Optional[str] = None) -> Path:
    """Resolve the data directory.

    Args:
        home: Explicit directory. Falls back to $SUPER_CALC_HOME, then ~/.super-calc.

    Returns:
        Absolute path (not created).
    """
    raw = home or os.environ.get(HOME_ENV_VAR) or DEFAULT_HOME
    return Path(raw).expanduser().resolve()


def load_config(home: Path) -> CalcConfig:
    """Load configuration from <home>/config.json.

    Args:
        home: Data directory.

    Returns:
        CalcConfig with settings from config.json or defaults.
    """
    config_file = Path(home) / "config.json"

    if config_file.exists():
        try:
            with open(config_file) as f:
                data = json.load(f)
            if isinstance(data, dict):
                return CalcConfig.from_dict(data)
        except (json.JSONDecodeError, IOError):
            pass

    return CalcConfig()
