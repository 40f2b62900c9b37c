import os
from pathlib import Path
from typing import Any

from tomlkit import dumps, parse

CONFIG_DIR = Path.home() / ".config" / "buildconfig"

CONFIG_FILE = CONFIG_DIR / "config.toml"


def load_config() -> dict[str, Any]:
    """Load configuration from the TOML file."""
    if not CONFIG_FILE.exists():
        return {}

    with open(CONFIG_FILE, "r", encoding="utf-8") as f:
        return parse(f.read())


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to the TOML file."""
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        f.write(dumps(config))

    # The file may hold a cluster token.
    os.chmod(CONFIG_FILE, 0o600)


def set_nested_value(config: dict[str, Any], key: str, value: str) -> None:
    """Set a nested configuration value using dot notation."""
    keys = key.split(".")
    current = config

    for k in keys[:-1]:
        if k not in current:
            current[k] = {}
        current = current[k]

    current[keys[-1]] = value


def get_nested_value(config: dict[str, Any], key: str) -> Any:
    """Get a nested configuration value using dot notation."""
    keys = key.split(".")
    value = config
    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return None
    return value
