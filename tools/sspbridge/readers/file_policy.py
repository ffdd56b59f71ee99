"""
Import file policy

Checks applied to an uploaded file before any parsing happens.
"""

import logging
from pathlib import PurePath
from typing import Optional

logger = logging.getLogger(__name__)

MAX_IMPORT_BYTES = 10 * 1024 * 1024

SUPPORTED_EXTENSIONS = frozenset({".json", ".xml", ".oscal"})
SUPPORTED_MIME_TYPES = frozenset({
    "application/json",
    "application/xml",
    "text/xml",
    "application/oscal+json",
    "application/oscal+xml",
})


class ImportRejectedError(ValueError):
    """Raised when a file fails the import policy"""


def is_supported_oscal_file(name: Optional[str], mime: Optional[str] = None) -> bool:
    """True when the extension or the MIME type names an OSCAL serialization"""
    extension = PurePath(name or "").suffix.lower()
    mime_type = (mime or "").split(";", 1)[0].strip().lower()
    return extension in SUPPORTED_EXTENSIONS or mime_type in SUPPORTED_MIME_TYPES


def format_file_size(size: int) -> str:
    """Human-readable size: 512 B, 1.5 KB, 10.0 MB"""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def check_import_file(name: Optional[str], size: int, mime: Optional[str] = None) -> None:
    """Raise ImportRejectedError unless the file may be imported"""
    if not is_supported_oscal_file(name, mime):
        raise ImportRejectedError(
            f"Invalid file type for {name or 'upload'}. "
            f"Please provide an OSCAL SSP file (.json, .xml or .oscal)"
        )

    if size > MAX_IMPORT_BYTES:
        raise ImportRejectedError(
            f"File is too large ({format_file_size(size)}). "
            f"Maximum size is {format_file_size(MAX_IMPORT_BYTES)}."
        )

    logger.debug(f"Accepted {name} ({format_file_size(size)}) for import")
