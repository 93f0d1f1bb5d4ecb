from __future__ import annotations

import datetime
import logging
from pathlib import Path

from rich.console import Console
from rich.text import Text

from ..config import YAMLQ_CONFIG

LOGGER_NAME = "yamlq"


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


class _YamlqRichConsoleHandler(logging.Handler):
    """Console handler rendering ``time LEVEL message [file:line]`` with rich."""

    _LEVEL_STYLES = {
        "DEBUG": "dim",
        "INFO": "cyan",
        "WARNING": "yellow",
        "ERROR": "bold red",
        "CRITICAL": "bold red",
    }

    def __init__(self, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._console = Console(stderr=True)

    @staticmethod
    def _format_location(record: logging.LogRecord) -> str:
        return f"[{Path(record.pathname).name}:{record.lineno}]"

    @staticmethod
    def _format_message_text(record: logging.LogRecord) -> Text:
        message = record.getMessage()
        text = Text(message)
        color = getattr(record, "yamlq_action_color", None)
        if isinstance(color, str) and message:
            action, _, _ = message.partition(" ")
            text.stylize(color, 0, len(action))
        return text

    def emit(self, record: logging.LogRecord) -> None:
        try:
            timestamp = datetime.datetime.fromtimestamp(record.created).strftime(
                "%H:%M:%S"
            )
            line = Text(f"{timestamp} ", style="dim")
            line.append(
                f"{record.levelname:<8} ",
                style=self._LEVEL_STYLES.get(record.levelname, ""),
            )
            line.append_text(self._format_message_text(record))
            line.append(f" {self._format_location(record)}", style="dim")
            self._console.print(line, highlight=False, soft_wrap=True)
        except Exception:
            self.handleError(record)


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach the rich console handler to the yamlq logger once."""

    logger = get_logger()
    if not any(isinstance(h, _YamlqRichConsoleHandler) for h in logger.handlers):
        logger.addHandler(_YamlqRichConsoleHandler())
    logger.setLevel(level if level is not None else YAMLQ_CONFIG.log_level)
    return logger


__all__ = ["LOGGER_NAME", "configure_logging", "get_logger"]
