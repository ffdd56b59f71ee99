"""
OSCAL JSON serializer
"""

import json
from datetime import date
from typing import Any, Dict, Optional

from ..model.flat import FlatModel, text

FILE_EXTENSIONS = {"json": "json", "xml": "xml"}


def to_json(graph: Dict[str, Any]) -> str:
    """Serialize an SSP graph to indented JSON; key order is preserved"""
    return json.dumps(graph, indent=2, ensure_ascii=False)


def export_filename(flat: FlatModel, fmt: str = "json", today: Optional[date] = None) -> str:
    """Download filename, e.g. ABC_OSCAL_2024-05-01.json"""
    extension = FILE_EXTENSIONS.get((fmt or "").lower())
    if extension is None:
        raise ValueError(f"Unsupported export format: {fmt}")

    acronym = text(flat.get("sysAcronym")) if isinstance(flat, dict) else None
    stamp = (today or date.today()).isoformat()
    return f"{acronym or 'SSP'}_OSCAL_{stamp}.{extension}"
