"""
Export and import pipelines

The two composite operations a caller needs: build-and-validate for export,
and parse-validate-map for import. Neither discards its result when the
document fails validation.
"""

import logging
from typing import Any, Dict, Optional, Union

from .mappers import FlatMapper, build_ssp
from .model.flat import FlatModel
from .model.oscal import OSCAL_VERSION, ROOT_KEY
from .readers import parse_ssp
from .validation import (
    OSCALValidator,
    format_validation_errors,
    format_validation_warnings,
    get_validation_summary,
)

logger = logging.getLogger(__name__)


def generate_and_validate(flat: FlatModel, document_title: Optional[str] = None,
                          org_name: Optional[str] = None, version: Optional[str] = None,
                          profile_ref: Optional[str] = None,
                          validator: Optional[OSCALValidator] = None) -> Dict[str, Any]:
    """Build an SSP from the flat model and validate it

    The document is returned even when invalid; exporting it anyway is the
    caller's decision.
    """
    document = build_ssp(
        flat,
        document_title=document_title,
        org_name=org_name,
        version=version,
        profile_ref=profile_ref
    )
    validation = (validator or OSCALValidator()).validate(document)

    return {
        "success": validation["valid"],
        "document": document,
        "validation": validation,
        "summary": get_validation_summary(validation),
        "formatted_errors": format_validation_errors(validation),
        "formatted_warnings": format_validation_warnings(validation)
    }


def _document_info(graph: Dict[str, Any]) -> Dict[str, str]:
    ssp = graph.get(ROOT_KEY) if isinstance(graph, dict) else None
    metadata = ssp.get("metadata") if isinstance(ssp, dict) else None
    if not isinstance(metadata, dict):
        metadata = {}

    return {
        "title": str(metadata.get("title") or "Untitled"),
        "version": str(metadata.get("version") or "1.0"),
        "last_modified": str(metadata.get("last-modified") or ""),
        "oscal_version": str(metadata.get("oscal-version") or OSCAL_VERSION)
    }


def import_and_report(content: Union[bytes, str], hint: Optional[str],
                      validator: Optional[OSCALValidator] = None) -> Dict[str, Any]:
    """Parse, validate and map an SSP document to the flat model

    Parse errors propagate; schema problems are reported, not raised.
    """
    parsed = parse_ssp(content, hint)
    validation = (validator or OSCALValidator()).validate(parsed.graph)

    notes = list(parsed.notes)
    if parsed.source_format == "xml":
        notes.insert(0, "Imported from XML format - some formatting may differ")
    if not validation["valid"]:
        notes.append(f"Document has {len(validation['errors'])} schema validation error(s)")

    data, mapping_notes = FlatMapper().map(parsed.graph)
    notes.extend(mapping_notes)

    logger.info(
        f"Imported {parsed.source_format.upper()} SSP "
        f"({'valid' if validation['valid'] else 'invalid'}, {len(notes)} note(s))"
    )

    return {
        "success": True,
        "data": data,
        "graph": parsed.graph,
        "validation": validation,
        "warnings": notes,
        "source_format": parsed.source_format,
        "document_info": _document_info(parsed.graph)
    }
