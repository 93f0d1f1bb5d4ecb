from __future__ import annotations

import logging
import os

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_positive_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_log_level(name: str, default: str) -> str:
    raw = os.getenv(name, default).strip().upper()
    if not isinstance(logging.getLevelName(raw), int):
        raise ValueError(f"{name} must be a logging level name, got {raw!r}")
    return raw


def parse_yaml_version(raw: str, *, source: str = "YAMLQ_YAML_VERSION") -> tuple[int, int] | None:
    """Parse a ``major.minor`` version directive; ``none`` disables it."""

    text = raw.strip().lower()
    if text in {"", "none", "off"}:
        return None
    major, sep, minor = text.partition(".")
    if not sep or not major.isdigit() or not minor.isdigit():
        raise ValueError(f"{source} must look like '1.1' or 'none', got {raw!r}")
    version = (int(major), int(minor))
    if version[0] != 1:
        raise ValueError(f"{source} must be a YAML 1.x version, got {raw!r}")
    return version


class YamlqConfig:
    """Process-wide settings, read from the environment."""

    def __init__(self) -> None:
        self.log_level = _env_log_level("YAMLQ_LOG_LEVEL", "WARNING")
        self.emit_version = parse_yaml_version(os.getenv("YAMLQ_YAML_VERSION", "1.1"))
        self.emit_indent = _env_positive_int("YAMLQ_EMIT_INDENT")
        self.emit_width = _env_positive_int("YAMLQ_EMIT_WIDTH")
        self.allow_unicode = _env_bool("YAMLQ_ALLOW_UNICODE", True)


YAMLQ_CONFIG = YamlqConfig()


__all__ = ["YAMLQ_CONFIG", "YamlqConfig", "parse_yaml_version"]
