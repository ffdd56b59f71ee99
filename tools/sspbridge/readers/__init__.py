"""
Document readers for sspbridge

Readers parse OSCAL SSP JSON or XML into a document graph. The file policy
runs before any reader is invoked.
"""

from .base_reader import BaseReader, ParsedDocument
from .errors import MissingRootError, OSCALParseError, UnsupportedFormatError
from .file_policy import (
    MAX_IMPORT_BYTES,
    ImportRejectedError,
    check_import_file,
    format_file_size,
    is_supported_oscal_file,
)
from .ssp_reader import JSONReader, XMLReader, detect_format, parse_ssp

__all__ = [
    'BaseReader',
    'ParsedDocument',
    'JSONReader',
    'XMLReader',
    'parse_ssp',
    'detect_format',
    'OSCALParseError',
    'MissingRootError',
    'UnsupportedFormatError',
    'ImportRejectedError',
    'MAX_IMPORT_BYTES',
    'check_import_file',
    'format_file_size',
    'is_supported_oscal_file'
]
