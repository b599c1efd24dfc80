from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from typetrainer.core.content import PromptMode

logger = logging.getLogger(__name__)

HOME_ENV = "TYPETRAINER_HOME"


class ConfigError(ValueError):
    """A configuration value that cannot be used."""


def data_dir() -> Path:
    """Directory for the config file, results and log. ~/.typetrainer by default."""
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".typetrainer"


@dataclass(frozen=True)
class Settings:
    """Options fixed for the whole session."""

    backspace_enabled: bool = True
    blind_mode: bool = False
    highlight_enabled: bool = True
    auto_advance: bool = False
    require_full_correctness: bool = False
    repeat_on_mistake: bool = False
    mistake_terminate_threshold: Optional[int] = None
    time_limit: Optional[float] = None
    prompt_mode: PromptMode = PromptMode.SEQUENTIAL

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], base: Optional["Settings"] = None) -> "Settings":
        """Build settings from plain values, on top of ``base`` (or the defaults).

        Unknown keys are logged and skipped; known keys with an unusable
        value raise ConfigError.
        """
        known = {f.name for f in fields(cls)}
        changes: Dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                logger.warning("Ignoring unknown setting %r", key)
                continue
            changes[key] = _coerce(key, value)
        return replace(base or cls(), **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["prompt_mode"] = self.prompt_mode.value
        return data


_FLAGS = {
    "backspace_enabled",
    "blind_mode",
    "highlight_enabled",
    "auto_advance",
    "require_full_correctness",
    "repeat_on_mistake",
}


def _coerce(key: str, value: Any) -> Any:
    if key in _FLAGS:
        if not isinstance(value, bool):
            raise ConfigError(f"{key}: expected true or false, got {value!r}")
        return value
    if key == "prompt_mode":
        try:
            return PromptMode(value)
        except ValueError:
            raise ConfigError(f"{key}: expected 'sequential' or 'random', got {value!r}") from None
    if value is None:
        return None
    if key == "mistake_terminate_threshold":
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"{key}: expected a positive integer, got {value!r}")
        return value
    # time_limit
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{key}: expected a positive number of seconds, got {value!r}")
    return float(value)


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read settings overrides from a YAML file.

    A missing file means no overrides. A file that cannot be read or parsed
    is logged and treated as empty.
    """
    if not path.exists():
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Could not load config from %s: %s", path, e)
        return {}
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Config file %s is not a mapping, ignoring it", path)
        return {}
    return raw
