"""
Import errors

Only unparseable input raises; everything else is reported as data.
"""

from ..model.oscal import ROOT_KEY


class OSCALParseError(ValueError):
    """Raised when a document cannot be parsed as OSCAL"""


class MissingRootError(OSCALParseError):
    """Raised when a well-formed document lacks the SSP root"""

    def __init__(self, found=None):
        message = f"Invalid OSCAL SSP: missing '{ROOT_KEY}' root"
        if found:
            message += f" (found {found})"
        super().__init__(message)


class UnsupportedFormatError(OSCALParseError):
    """Raised when the declared type or extension is not JSON or XML"""
