"""JSON-based settings persistence for the learning tracker."""

import json
import os

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".learning-streak-settings.json")

_DEFAULTS = {
    "first_weekday": 0,
    "overwrite_policy": "accumulate",
    "default_topic": "Swift",
    "default_duration": "Week",
    "history_months": 12,
    "history_months_before": 3,
    "window_width": None,
    "window_height": None,
    "log_level": "INFO",
    "log_file": None,
}

_POLICIES = ("accumulate", "reconcile")
_DURATIONS = ("Week", "Month", "Year")
_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def load_settings() -> dict:
    """Load settings from disk, returning defaults for missing keys."""
    settings = dict(_DEFAULTS)
    try:
        with open(_SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
        if not isinstance(stored, dict):
            return settings
        if _is_int(stored.get("first_weekday")) and 0 <= stored["first_weekday"] <= 6:
            settings["first_weekday"] = stored["first_weekday"]
        if stored.get("overwrite_policy") in _POLICIES:
            settings["overwrite_policy"] = stored["overwrite_policy"]
        topic = stored.get("default_topic")
        if isinstance(topic, str) and topic.strip():
            settings["default_topic"] = topic.strip()
        if isinstance(stored.get("default_duration"), str):
            label = stored["default_duration"].strip().capitalize()
            if label in _DURATIONS:
                settings["default_duration"] = label
        for key in ("history_months", "history_months_before"):
            if _is_int(stored.get(key)):
                settings[key] = max(0, min(24, stored[key]))
        for key in ("window_width", "window_height"):
            if _is_int(stored.get(key)) and stored[key] > 0:
                settings[key] = stored[key]
        level = stored.get("log_level")
        if isinstance(level, str) and level.upper() in _LEVELS:
            settings["log_level"] = level.upper()
        if isinstance(stored.get("log_file"), str) and stored["log_file"]:
            settings["log_file"] = stored["log_file"]
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        pass
    return settings


def save_settings(settings: dict) -> None:
    """Persist settings to disk."""
    with open(_SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
