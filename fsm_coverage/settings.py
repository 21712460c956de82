"""
Analyzer settings loaded from fsm_coverage.yaml

Example:
    enabled: true
    severity: warning
    include: ["*.py"]
    exclude: ["*/migrations/*", "build/*"]
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .types import ConfigError, Severity

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "fsm_coverage.yaml"

ALLOWED_KEYS = {"enabled", "severity", "include", "exclude"}


@dataclass
class AnalyzerSettings:
    """Host-level switches. There is no precision setting."""
    enabled: bool = True
    severity: Severity = Severity.ERROR
    include: List[str] = field(default_factory=lambda: ["*.py"])
    exclude: List[str] = field(default_factory=list)


def parse_severity(value) -> Severity:
    try:
        return Severity(str(value).lower())
    except ValueError:
        allowed = ", ".join(s.value for s in Severity)
        raise ConfigError(f"Invalid severity '{value}' (expected one of: {allowed})")


def _pattern_list(raw: dict, key: str, default: List[str]) -> List[str]:
    value = raw.get(key, default)
    if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
        raise ConfigError(f"'{key}' must be a list of glob patterns")
    return list(value)


def settings_from_dict(raw: Optional[dict]) -> AnalyzerSettings:
    """Validate a parsed settings mapping."""
    if raw is None:
        return AnalyzerSettings()
    if not isinstance(raw, dict):
        raise ConfigError("Settings file must contain a mapping")

    unknown = set(raw) - ALLOWED_KEYS
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")

    enabled = raw.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigError(f"'enabled' must be true or false, got {enabled!r}")

    defaults = AnalyzerSettings()
    return AnalyzerSettings(
        enabled=enabled,
        severity=parse_severity(raw.get("severity", defaults.severity.value)),
        include=_pattern_list(raw, "include", defaults.include),
        exclude=_pattern_list(raw, "exclude", defaults.exclude),
    )


def load_settings(path: Optional[str] = None) -> AnalyzerSettings:
    """Load settings from path, or from ./fsm_coverage.yaml if present.

    An explicit path that does not exist is an error; a missing default
    file yields default settings.
    """
    if path is None:
        default = Path(DEFAULT_SETTINGS_FILE)
        if not default.exists():
            return AnalyzerSettings()
        path = str(default)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Settings file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}: {e}")

    settings = settings_from_dict(raw)
    logger.debug(f"Loaded settings from {path}: {settings}")
    return settings
