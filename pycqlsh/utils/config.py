"""Configuration management for pycqlsh.

Settings come from built-in defaults, overlaid by ``~/.pycqlsh_config.json``,
then by environment variables. Command-line flags override all of these.
"""
from __future__ import annotations
from typing import Dict, Any, Optional
import os
import json
import logging

logger = logging.getLogger(__name__)

CONFIG_FILE = "~/.pycqlsh_config.json"

# Default configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    "engine": "cassandra",
    "host": "localhost",
    "port": 9042,
    "output_format": "tabular",
    "max_width": 100,
    "color": False,
    "consistency": "ONE",
    "page_size": 100,
    "history_file": "~/.pycqlsh_history",
}

ENV_OVERRIDES = {
    "PYCQLSH_MAX_WIDTH": ("max_width", int),
    "PYCQLSH_COLOR": ("color", lambda v: v == "1"),
}


class Config:
    """Configuration manager for pycqlsh settings."""

    def __init__(self, config_file: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        self.settings: Dict[str, Any] = DEFAULT_CONFIG.copy()
        self.config_file = os.path.expanduser(config_file or os.getenv("PYCQLSH_CONFIG") or CONFIG_FILE)
        self._load_config()
        self._apply_env(os.environ if environ is None else environ)

    def _load_config(self) -> None:
        """Load configuration from file if exists."""
        if not os.path.exists(self.config_file):
            return
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load config: {e}")
            return
        if isinstance(data, dict):
            self.settings.update(data)
        else:
            logger.warning(f"Ignoring config file {self.config_file}: expected a JSON object")

    def _apply_env(self, environ) -> None:
        for var, (key, convert) in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if not raw:
                continue
            try:
                self.settings[key] = convert(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid {var}={raw!r}")

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            logger.warning(f"Failed to save config: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value, coercing to the type of the default where one exists."""
        default = DEFAULT_CONFIG.get(key)
        if isinstance(value, str):
            if isinstance(default, bool):
                value = value.strip().lower() in ("1", "true", "on", "yes")
            elif isinstance(default, int):
                value = int(value)
        self.settings[key] = value

# Global config instance
config = Config()
