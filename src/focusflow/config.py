"""Configuration management for Focusflow."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from focusflow.core.errors import ValidationError

logger = logging.getLogger(__name__)

FOCUSFLOW_HOME = Path(os.environ.get("FOCUSFLOW_HOME", Path.home() / "focusflow"))
CONFIG_FILE = FOCUSFLOW_HOME / "config" / "focusflow.conf"
DATA_DIR = FOCUSFLOW_HOME / "data"

INT_KEYS = {
    "trend_days",
    "week_days",
    "focus_duration",
    "short_break",
    "long_break",
    "sessions_before_long_break",
    "llm_timeout",
}


@dataclass
class Config:
    """Focusflow configuration."""

    timezone: str = "UTC"
    snapshot_file: str = str(DATA_DIR / "snapshot.json")
    trend_days: int = 30
    week_days: int = 7
    # Pomodoro intervals, in minutes
    focus_duration: int = 25
    short_break: int = 5
    long_break: int = 15
    sessions_before_long_break: int = 4
    # Optional chat-completions enrichment
    llm_base_url: str = "https://api.deepseek.com"
    llm_model: str = "deepseek-chat"
    llm_timeout: int = 30
    llm_api_key: str = ""

    @property
    def tz(self) -> ZoneInfo:
        """Reference time zone for every calendar-day computation."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError(f"Unknown timezone: {self.timezone}")


def _unquote(value: str) -> str:
    """Strip quotes, or an inline # comment from unquoted values."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def parse_config(text: str) -> Config:
    """Parse KEY=value lines into a Config. Unknown keys are ignored."""
    config = Config()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        if key in INT_KEYS:
            try:
                setattr(config, key, int(value))
            except ValueError:
                logger.warning(f"Ignoring non-integer {key.upper()}: {value!r}")
            continue

        match key:
            case "timezone":
                config.timezone = value
            case "snapshot_file":
                config.snapshot_file = value
            case "llm_base_url":
                config.llm_base_url = value
            case "llm_model":
                config.llm_model = value
            case "llm_api_key":
                config.llm_api_key = value

    return config


def load_config(path: Path | None = None) -> Config:
    """Load configuration from focusflow.conf, then the environment."""
    path = path or CONFIG_FILE
    config = parse_config(path.read_text()) if path.exists() else Config()

    env_key = os.environ.get("LLM_API_KEY") or os.environ.get("DEEPSEEK_API_KEY")
    if env_key:
        config.llm_api_key = env_key
    if os.environ.get("FOCUSFLOW_TIMEZONE"):
        config.timezone = os.environ["FOCUSFLOW_TIMEZONE"]

    return config
