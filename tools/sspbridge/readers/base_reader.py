"""
Base reader class for sspbridge

Provides common functionality for the OSCAL document readers.
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .errors import OSCALParseError


@dataclass
class ParsedDocument:
    """A parsed SSP graph with the notes gathered while reading it"""
    graph: Dict[str, Any]
    source_format: str
    notes: List[str] = field(default_factory=list)
    source_hash: str = ""


class BaseReader(ABC):
    """Base class for OSCAL document readers"""

    source_format = ""

    def __init__(self, content: Union[bytes, str]):
        if not isinstance(content, (bytes, bytearray, str)):
            raise OSCALParseError(f"Expected bytes or text, got {type(content).__name__}")
        self.content = content
        self.source_hash = self._calculate_hash()

    def _calculate_hash(self) -> str:
        """Calculate SHA-256 hash of the input for auditability"""
        data = self.content.encode("utf-8") if isinstance(self.content, str) else bytes(self.content)
        return hashlib.sha256(data).hexdigest()

    def _decode(self) -> str:
        """Decode the input as UTF-8, tolerating a byte order mark"""
        if isinstance(self.content, str):
            return self.content.lstrip("\ufeff")
        try:
            return bytes(self.content).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise OSCALParseError(f"Document is not valid UTF-8: {e}") from e

    def _create_document(self, graph: Dict[str, Any], notes: List[str]) -> ParsedDocument:
        return ParsedDocument(
            graph=graph,
            source_format=self.source_format,
            notes=notes,
            source_hash=self.source_hash
        )

    @abstractmethod
    def read(self) -> ParsedDocument:
        """Parse the input into an SSP graph"""
        pass
