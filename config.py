import tomllib
import shutil
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from dotenv import load_dotenv

CONFIG_DIR = Path.home() / ".quickrevise"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_INTERVALS = [0, 1, 5, 15, 30, 60, 120, 180]
DEFAULT_QUIZ_LIMITS = {"free": 1, "standard": 1, "premium": 3}
DEFAULT_DOUBT_LIMITS = {"free": 2, "standard": -1, "premium": -1}


def _parse_intervals(raw: Any) -> List[int]:
    """Review offsets in days; anything unparseable, negative or out of order gives the defaults."""
    if isinstance(raw, str):
        raw = [item for item in raw.split(",") if item.strip()]
    try:
        intervals = [int(item) for item in raw or []]
    except (TypeError, ValueError):
        return list(DEFAULT_INTERVALS)
    if not intervals or intervals[0] < 0:
        return list(DEFAULT_INTERVALS)
    if any(later <= earlier for earlier, later in zip(intervals, intervals[1:])):
        return list(DEFAULT_INTERVALS)
    return intervals


def load_config() -> Dict[str, Any]:
    """Load config from ~/.quickrevise/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    server_cfg = config.get("server", {})
    config["server"] = {
        "host": os.getenv("QUICKREVISE_HOST", server_cfg.get("host", "127.0.0.1")),
        "port": int(os.getenv("QUICKREVISE_PORT", server_cfg.get("port", 8000))),
        "log_level": os.getenv("QUICKREVISE_LOG_LEVEL", server_cfg.get("log_level", "info")).lower(),
    }
    schedule_cfg = config.get("schedule", {})
    config["schedule"] = {
        "intervals": _parse_intervals(
            os.getenv("QUICKREVISE_INTERVALS", schedule_cfg.get("intervals", DEFAULT_INTERVALS))
        ),
        "timezone": os.getenv("QUICKREVISE_TIMEZONE", schedule_cfg.get("timezone", "UTC")),
    }
    limits_cfg = config.get("limits", {})
    config["limits"] = {
        "quizzes_per_subject": {**DEFAULT_QUIZ_LIMITS, **limits_cfg.get("quizzes_per_subject", {})},
        "doubts_per_day": {**DEFAULT_DOUBT_LIMITS, **limits_cfg.get("doubts_per_day", {})},
    }
    return config


def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('schedule', 'intervals')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
