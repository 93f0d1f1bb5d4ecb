"""Error taxonomy shared by the parser, navigator and re-emitter."""

from __future__ import annotations

from typing import Literal, TypeAlias

ParseErrorKind: TypeAlias = Literal["reader", "scanner", "syntax", "composition"]
EmitErrorKind: TypeAlias = Literal["out_of_memory", "writer", "protocol"]


class YamlqError(Exception):
    """Base class for every error raised by yamlq."""


class ParseError(YamlqError):
    """Raised when the input is not a well-formed YAML document."""

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        context: str | None = None,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.context = context
        self.line = line
        self.column = column
        super().__init__(self._describe())

    def _describe(self) -> str:
        text = f"invalid input syntax for type yaml ({self.kind}): {self.message}"
        if self.context:
            text = f"{text} ({self.context})"
        if self.line is not None and self.column is not None:
            text = f"{text} at line {self.line + 1}, column {self.column + 1}"
        return text


class StructuralError(YamlqError):
    """Raised when an event stream violates the nesting invariant."""


class InvalidOperation(YamlqError):
    """Raised when an operation requires a different document shape."""


class EmitError(YamlqError):
    """Raised when a fragment cannot be serialized."""

    def __init__(self, kind: EmitErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(f"cannot emit yaml fragment ({kind}): {message}")


__all__ = [
    "EmitError",
    "EmitErrorKind",
    "InvalidOperation",
    "ParseError",
    "ParseErrorKind",
    "StructuralError",
    "YamlqError",
]
