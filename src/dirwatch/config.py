"""Loading and saving watch configuration files."""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from .constants import CONFIG_FILE, INTERVAL_ENV_VAR
from .core import WatchConfig
from .errors import ConfigError


def find_config(start: Optional[Path] = None) -> Optional[Path]:
    """Return the .dirwatch.yaml in a directory, if there is one."""
    candidate = (start or Path.cwd()) / CONFIG_FILE
    return candidate if candidate.is_file() else None


def load_watch_config(path: Union[str, Path]) -> WatchConfig:
    """Load watch configuration from a YAML file.

    Settings may sit at the top level or under a ``watch:`` key.

    Raises:
        ConfigError: If the file is missing, malformed or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration not found at {path}")

    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")

    section = data.get("watch", data)
    try:
        return WatchConfig(**section)
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def apply_env_overrides(config: WatchConfig) -> WatchConfig:
    """Return a copy of the config with environment overrides applied."""
    raw = os.environ.get(INTERVAL_ENV_VAR)
    if raw is None or not raw.strip():
        return config

    try:
        interval = float(raw)
    except ValueError:
        raise ConfigError(f"{INTERVAL_ENV_VAR} must be a number, got '{raw}'")
    if interval < 0:
        raise ConfigError(f"{INTERVAL_ENV_VAR} must be >= 0, got {interval}")
    return config.model_copy(update={"interval": interval})


def save_watch_config(config: WatchConfig, path: Union[str, Path]) -> None:
    """Save watch configuration atomically.

    Writes to a temp file in the same directory, then renames it over the
    target so readers never see a partial file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = yaml.safe_dump(config.model_dump(mode="json"), default_flow_style=False)

    with tempfile.NamedTemporaryFile(
        mode="w",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
    ) as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        tmp = Path(f.name)

    try:
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
