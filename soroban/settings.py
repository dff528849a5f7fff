"""Last-used drill settings, restored on the next launch.

Stored in ~/.soroban-trainer/settings.yaml. Problem history is not kept.
"""

import os
import threading

import yaml

SETTINGS_DIR = os.path.expanduser("~/.soroban-trainer")
SETTINGS_FILE = os.path.join(SETTINGS_DIR, "settings.yaml")
_lock = threading.Lock()


def _load_all(path: str) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (FileNotFoundError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def load_last(defaults: dict, path: str = SETTINGS_FILE) -> dict:
    """Stored settings merged over defaults. Unknown keys are dropped."""
    stored = _load_all(path)
    return {k: stored.get(k, v) for k, v in defaults.items()}


def save_last(values: dict, path: str = SETTINGS_FILE) -> None:
    """Save the settings used for the latest run."""
    with _lock:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(values, f, allow_unicode=True, sort_keys=True)
