"""
Serializers for OSCAL SSP graphs

JSON and XML renderings of the same document graph.
"""

from .json_serializer import export_filename, to_json
from .xml_serializer import to_xml

__all__ = [
    'to_json',
    'to_xml',
    'export_filename'
]
