"""
Configuration and logging setup.

Configuration is a YAML mapping, loaded from an explicit path or from the file
named by NOSTR_ENVELOPE_CONFIG. Missing keys keep their defaults.
"""
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import InvalidInputError


CONFIG_ENV_VAR = "NOSTR_ENVELOPE_CONFIG"
LOG_FORMAT = "[%(asctime)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_PRIVACY_LEVELS = ("giftwrapped", "encrypted", "standard")


@dataclass(frozen=True)
class EnvelopeConfig:
    """Tunables for the envelope layer."""
    default_privacy_level: str = "giftwrapped"
    default_delay_minutes: int = 0
    fan_out_workers: int = 8
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.default_privacy_level not in _PRIVACY_LEVELS:
            raise InvalidInputError(
                f"default_privacy_level must be one of {', '.join(_PRIVACY_LEVELS)}"
            )
        if not isinstance(self.default_delay_minutes, int) or self.default_delay_minutes < 0:
            raise InvalidInputError("default_delay_minutes must be a non-negative integer")
        if not isinstance(self.fan_out_workers, int) or self.fan_out_workers < 1:
            raise InvalidInputError("fan_out_workers must be a positive integer")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise InvalidInputError(f"Unknown log_level: {self.log_level}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EnvelopeConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidInputError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return replace(cls(), **data)


def load_config(path: Optional[Union[str, Path]] = None) -> EnvelopeConfig:
    """
    Load configuration from YAML.

    Args:
        path: Config file path. Defaults to $NOSTR_ENVELOPE_CONFIG if set.

    Returns:
        EnvelopeConfig (defaults when no file is configured)
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return EnvelopeConfig()

    with open(path, 'r') as f:
        data = yaml.safe_load(f)

    if data is None:
        return EnvelopeConfig()
    if not isinstance(data, dict):
        raise InvalidInputError(f"Config file {path} must contain a mapping")
    return EnvelopeConfig.from_dict(data)


def configure_logging(level: Union[str, int, None] = None) -> None:
    """
    Install the timestamped log format on the root logger.

    Applications call this once at startup; the envelope layer itself only
    creates module loggers and never configures handlers.
    """
    if level is None:
        level = EnvelopeConfig().log_level
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
