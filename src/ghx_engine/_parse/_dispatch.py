"""Format detection and the single parse entry point."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from ghx_engine._errors import UnknownFormatError, XmlMalformedError
from ghx_engine._graph import Graph

from ._archive import parse_archive
from ._common import strip_preamble
from ._compact import parse_compact

logger = logging.getLogger(__name__)


def parse(xml_text: str) -> Graph:
    """Parse a document in either supported shape.

    A leading byte-order mark, surrounding whitespace and the XML
    declaration are removed first. The root element selects the reader:
    ``<ghx>`` for the compact shape and ``<archive>`` for the archive shape
    (compared case-insensitively).

    Raises:
        XmlMalformedError: If the text is not well-formed XML.
        UnknownFormatError: If the root element is neither ``ghx`` nor ``archive``.
        ParseError: Any error raised by the selected reader.

    Example:
        >>> graph = parse('<ghx><objects><object id="0" name="Pi"/></objects></ghx>')
        >>> len(graph)
        1

    """
    body = strip_preamble(xml_text)
    try:
        root = ET.fromstring(body)  # noqa: S314
    except ET.ParseError as e:
        msg = f"Malformed XML: {e}"
        raise XmlMalformedError(msg) from e

    tag = root.tag.lower()
    logger.debug("Document root element: <%s>", root.tag)
    if tag == "ghx":
        return parse_compact(root)
    if tag == "archive":
        return parse_archive(root)
    raise UnknownFormatError(root.tag)


def parse_file(path: Path) -> Graph:
    """Read a UTF-8 document from disk and parse it."""
    return parse(path.read_text(encoding="utf-8-sig"))
