from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Literal

import chz
from rich.console import Console

from . import query
from .errors import YamlqError
from .runtime.logging import configure_logging, get_logger

Operation = Literal[
    "typeof",
    "length",
    "get",
    "get_text",
    "element",
    "element_text",
    "path",
    "path_text",
    "elements",
    "elements_text",
    "validate",
]


@chz.chz
class QueryCommand:
    op: Operation
    file: str = "-"
    key: str | None = None
    index: int | None = None
    path: str = ""

    def read_document(self) -> bytes:
        if self.file == "-":
            return sys.stdin.buffer.read()
        return Path(self.file).read_bytes()

    def run(self) -> Iterable[str | None]:
        document = self.read_document()
        match self.op:
            case "typeof":
                return [query.type_of(document)]
            case "length":
                return [str(query.length_of(document))]
            case "get":
                return [query.get_field(document, self._required_key())]
            case "get_text":
                return [query.get_field_text(document, self._required_key())]
            case "element":
                return [query.get_element(document, self._required_index())]
            case "element_text":
                return [query.get_element_text(document, self._required_index())]
            case "path":
                return [query.get_path(document, self.path)]
            case "path_text":
                return [query.get_path_text(document, self.path)]
            case "elements":
                return query.elements_of(document)
            case "elements_text":
                return (
                    "" if item is None else item
                    for item in query.elements_text_of(document)
                )
            case "validate":
                query.validate(document)
                return ["ok"]
        raise ValueError(f"unknown operation {self.op!r}")

    def _required_key(self) -> str:
        if self.key is None:
            raise ValueError(f"op={self.op} requires key=...")
        return self.key

    def _required_index(self) -> int:
        if self.index is None:
            raise ValueError(f"op={self.op} requires index=...")
        return self.index


def _write(result: str | None) -> None:
    if result is None:
        return
    sys.stdout.write(result if result.endswith("\n") else f"{result}\n")


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    command = chz.entrypoint(
        QueryCommand, argv=list(argv) if argv is not None else None
    )
    try:
        for result in command.run():
            _write(result)
    except (YamlqError, ValueError, OSError) as exc:
        get_logger().debug("%s failed: %s", command.op, exc)
        Console(stderr=True).print(f"error: {exc}", style="bold red", markup=False)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
