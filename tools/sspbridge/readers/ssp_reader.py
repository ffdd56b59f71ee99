"""
OSCAL SSP document reader

Parses JSON or XML bytes into an SSP graph. The format is chosen strictly
from the declared MIME type or file extension, never by sniffing content.
"""

import json
import logging
import xml.etree.ElementTree as ET
from pathlib import PurePath
from typing import Optional, Union

from ..model.oscal import ROOT_KEY
from .base_reader import BaseReader, ParsedDocument
from .errors import MissingRootError, OSCALParseError, UnsupportedFormatError
from .xml_tree import coerce_to_graph, parse_tree

logger = logging.getLogger(__name__)

JSON_HINTS = frozenset({".json", "application/json", "application/oscal+json"})
XML_HINTS = frozenset({".xml", ".oscal", "application/xml", "text/xml", "application/oscal+xml"})


def _normalize_hint(hint: Optional[str]) -> str:
    """MIME type without parameters, or a dotted extension"""
    value = (hint or "").split(";", 1)[0].strip().lower()
    if not value or value.startswith(("application/", "text/")):
        return value
    if value.startswith(".") and "/" not in value:
        return value
    return PurePath(value).suffix or "." + value


def detect_format(hint: Optional[str]) -> str:
    """Return 'json' or 'xml' for a MIME type, extension or filename"""
    value = _normalize_hint(hint)

    if value in JSON_HINTS:
        return "json"
    if value in XML_HINTS:
        return "xml"
    raise UnsupportedFormatError(
        f"Unsupported format {hint!r}: expected JSON (.json, application/json) "
        f"or XML (.xml, .oscal, application/xml, text/xml)"
    )


class JSONReader(BaseReader):
    """Reader for OSCAL JSON documents"""

    source_format = "json"

    def read(self) -> ParsedDocument:
        try:
            graph = json.loads(self._decode())
        except json.JSONDecodeError as e:
            raise OSCALParseError(
                f"Malformed JSON at line {e.lineno}, column {e.colno}: {e.msg}"
            ) from e
        except RecursionError as e:
            raise OSCALParseError("JSON document is nested too deeply") from e

        if not isinstance(graph, dict) or ROOT_KEY not in graph:
            found = ", ".join(list(graph)[:3]) if isinstance(graph, dict) and graph else None
            raise MissingRootError(found)

        logger.info("Parsed OSCAL JSON document")
        return self._create_document(graph, [])


class XMLReader(BaseReader):
    """Reader for OSCAL XML documents"""

    source_format = "xml"

    def read(self) -> ParsedDocument:
        content = self.content if isinstance(self.content, str) else bytes(self.content)
        try:
            tree = parse_tree(content)
        except ET.ParseError as e:
            raise OSCALParseError(f"Malformed XML: {e}") from e
        except RecursionError as e:
            raise OSCALParseError("XML document is nested too deeply") from e

        if tree.tag != ROOT_KEY:
            raise MissingRootError(f"<{tree.tag}>")

        try:
            graph, notes = coerce_to_graph(tree)
        except RecursionError as e:
            raise OSCALParseError("XML document is nested too deeply") from e

        logger.info(f"Parsed OSCAL XML document ({len(notes)} coercion note(s))")
        return self._create_document(graph, notes)


READERS = {
    "json": JSONReader,
    "xml": XMLReader,
}


def parse_ssp(content: Union[bytes, str], hint: Optional[str]) -> ParsedDocument:
    """Parse an SSP document, dispatching on the declared type or extension

    Raises OSCALParseError (or a subclass) when the input cannot be parsed.
    """
    source_format = detect_format(hint)
    logger.debug(f"Reading {source_format.upper()} document (hint: {hint!r})")
    return READERS[source_format](content).read()
