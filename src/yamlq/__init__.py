"""
yamlq: path queries over YAML documents.

Documents are parsed into a flat event stream; lookups walk that stream by
nesting depth and re-emit the selected node as a standalone YAML fragment.

This package uses a src-layout. Import the package as `yamlq`.
"""

from importlib.metadata import version

__version__ = version("yamlq")

from .config import YAMLQ_CONFIG, YamlqConfig
from .emitter import extract_subtree
from .errors import (
    EmitError,
    InvalidOperation,
    ParseError,
    StructuralError,
    YamlqError,
)
from .navigator import Shape, classify_root, count_children, find_index, find_key
from .parser import parse
from .query import (
    elements_of,
    elements_text_of,
    get_element,
    get_element_text,
    get_field,
    get_field_text,
    get_path,
    get_path_text,
    length_of,
    type_of,
    validate,
)
from .runtime import configure_logging, get_logger
from .stream import Event, EventStream, Location

__all__ = [
    "__version__",
    "YAMLQ_CONFIG",
    "EmitError",
    "Event",
    "EventStream",
    "InvalidOperation",
    "Location",
    "ParseError",
    "Shape",
    "StructuralError",
    "YamlqConfig",
    "YamlqError",
    "classify_root",
    "configure_logging",
    "count_children",
    "elements_of",
    "elements_text_of",
    "extract_subtree",
    "find_index",
    "find_key",
    "get_element",
    "get_element_text",
    "get_field",
    "get_field_text",
    "get_logger",
    "get_path",
    "get_path_text",
    "length_of",
    "parse",
    "type_of",
    "validate",
]
