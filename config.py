"""
Simple JSON-backed configuration.
"""
import json
import os
from pathlib import Path

DEFAULTS = {
    "binary": "/usr/bin/at",
    "escape": True,
    "timeout": None,  # seconds, None waits for at forever
    "log_level": "WARNING",
}


def default_config_path() -> Path:
    env_path = os.environ.get("ATWRAP_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".atwrap" / "config.json"


class Config:
    def __init__(self, path=None):
        self.path = Path(path) if path else default_config_path()
        if not self.path.exists():
            self._write(DEFAULTS)
        self._load()

    def _load(self):
        with open(self.path, "r") as f:
            self.data = json.load(f)

    def _write(self, d):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(d, f, indent=2)

    def get(self, key, default=None):
        return self.data.get(key, DEFAULTS.get(key, default))

    def set(self, key, val):
        if key not in DEFAULTS:
            raise KeyError(f"Unknown config key: {key}")
        self.data[key] = val
        self._write(self.data)

    def all(self):
        merged = dict(DEFAULTS)
        merged.update(self.data)
        return merged


def coerce_value(val: str):
    """Turn a CLI string into int, float, bool or None where it looks like one."""
    try:
        return int(val)
    except ValueError:
        pass
    try:
        return float(val)
    except ValueError:
        pass
    if val.lower() in ("true", "false"):
        return val.lower() == "true"
    if val.lower() in ("none", "null"):
        return None
    return val
