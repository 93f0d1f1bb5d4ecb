from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass

import pytest

from .config import YAMLQ_CONFIG, YamlqConfig


@dataclass(frozen=True)
class _YamlqConfigSnapshot:
    log_level: str
    emit_version: tuple[int, int] | None
    emit_indent: int | None
    emit_width: int | None
    allow_unicode: bool

    @classmethod
    def capture(cls) -> "_YamlqConfigSnapshot":
        return cls(
            log_level=YAMLQ_CONFIG.log_level,
            emit_version=YAMLQ_CONFIG.emit_version,
            emit_indent=YAMLQ_CONFIG.emit_indent,
            emit_width=YAMLQ_CONFIG.emit_width,
            allow_unicode=YAMLQ_CONFIG.allow_unicode,
        )

    def restore(self) -> None:
        YAMLQ_CONFIG.log_level = self.log_level
        YAMLQ_CONFIG.emit_version = self.emit_version
        YAMLQ_CONFIG.emit_indent = self.emit_indent
        YAMLQ_CONFIG.emit_width = self.emit_width
        YAMLQ_CONFIG.allow_unicode = self.allow_unicode


def _apply_test_config(overrides: dict[str, object]) -> YamlqConfig:
    YAMLQ_CONFIG.log_level = "DEBUG"
    YAMLQ_CONFIG.emit_version = (1, 1)
    YAMLQ_CONFIG.emit_indent = None
    YAMLQ_CONFIG.emit_width = None
    YAMLQ_CONFIG.allow_unicode = True
    for name, value in overrides.items():
        if not hasattr(YAMLQ_CONFIG, name):
            raise AttributeError(f"unknown yamlq setting {name!r}")
        setattr(YAMLQ_CONFIG, name, value)
    return YAMLQ_CONFIG


@contextmanager
def yamlq_test_env(**overrides: object) -> Generator[YamlqConfig, None, None]:
    """Apply deterministic settings (plus ``overrides``) within the context."""
    snapshot = _YamlqConfigSnapshot.capture()
    try:
        yield _apply_test_config(overrides)
    finally:
        snapshot.restore()


@pytest.fixture()
def yamlq_config() -> Generator[YamlqConfig, None, None]:
    """Run the test against default settings, restored afterwards."""
    with yamlq_test_env() as config:
        yield config
