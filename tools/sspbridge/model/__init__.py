"""
Data model for sspbridge

The flat compliance model edited by the UI and the OSCAL vocabulary the
transforms translate it into.
"""

from .flat import FLAT_FIELDS, ROW_FIELDS, FlatModel
from .oscal import OSCAL_NAMESPACE, OSCAL_VERSION, ROOT_KEY

__all__ = [
    'FLAT_FIELDS',
    'ROW_FIELDS',
    'FlatModel',
    'OSCAL_NAMESPACE',
    'OSCAL_VERSION',
    'ROOT_KEY'
]
