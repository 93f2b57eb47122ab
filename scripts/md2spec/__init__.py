"""md2spec - Markdown agent spec → YAML/JSON converter.

Parses the eight-section agent spec dialect into a typed Spec record and
serializes it as YAML or JSON.

Example:
    >>> from pathlib import Path
    >>> from md2spec import parse_spec, to_yaml
    >>> spec = parse_spec(Path("ai-agent-php/spec.md").read_text())
    >>> print(to_yaml(spec))
"""

__version__ = "1.0.0"

from .converter import to_json, to_yaml
from .errors import ConversionError
from .md2spec import convert, convert_batch, find_specs
from .parser import parse_spec
from .schema import Spec

__all__ = [
    "convert",
    "convert_batch",
    "find_specs",
    "parse_spec",
    "to_json",
    "to_yaml",
    "ConversionError",
    "Spec",
]
