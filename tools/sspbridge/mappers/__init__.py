"""
OSCAL mappers for sspbridge

SSPMapper converts the flat compliance model to an OSCAL v1.1.2 SSP graph;
FlatMapper reverses it and records import notes for anything lossy.
"""

from .base_mapper import BaseMapper
from .ssp_mapper import SSPMapper, build_ssp
from .flat_mapper import FlatMapper, map_to_flat

__all__ = [
    'BaseMapper',
    'SSPMapper',
    'FlatMapper',
    'build_ssp',
    'map_to_flat'
]
