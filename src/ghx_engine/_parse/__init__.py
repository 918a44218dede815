"""Document readers producing a Graph.

This module contains:
- parse, parse_file: format detection and dispatch
- parse_compact: reader for the compact ``<ghx>`` shape
- parse_archive: reader for the ``<archive>`` chunk/item shape
"""

from ._archive import parse_archive
from ._common import infer_value, parse_number, strip_preamble
from ._compact import parse_compact, parse_pin_ref
from ._dispatch import parse, parse_file

__all__ = [
    "infer_value",
    "parse",
    "parse_archive",
    "parse_compact",
    "parse_file",
    "parse_number",
    "parse_pin_ref",
    "strip_preamble",
]
