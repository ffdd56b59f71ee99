"""
Validation reporter

Renders validation results as human-readable strings and rich tables.
"""

import logging
import re
from typing import Any, Dict, List

from rich.table import Table
from rich.text import Text

from ..model.oscal import ROOT_KEY

logger = logging.getLogger(__name__)

SECTION_LABELS = [
    ("metadata", "Metadata"),
    ("system-characteristics", "System Characteristics"),
    ("system-implementation", "System Implementation"),
    ("control-implementation", "Control Implementation"),
    ("import-profile", "Import Profile"),
    ("back-matter", "Back Matter"),
]

SEVERITY_ICONS = {
    "warning": "⚠️",
    "info": "ℹ️",
}


def readable_path(path: str, default: str, label_sections: bool = True) -> str:
    """Turn a JSON pointer into 'SSP > Metadata > parties' style labels"""
    readable = re.sub(rf"/{ROOT_KEY}(?=/|$)", "SSP", path or "")
    if label_sections:
        for segment, label in SECTION_LABELS:
            readable = re.sub(rf"/{segment}(?=/|$)", f" > {label}", readable)
    readable = readable.replace("/", " > ")
    readable = re.sub(r"^\s*>\s*", "", readable)
    readable = re.sub(r"\s+", " ", readable).strip()
    return readable or default


def format_validation_errors(result: Dict[str, Any]) -> List[str]:
    """One 'Path: message' line per schema error"""
    return [
        f"{readable_path(error.get('path'), 'Root')}: {error.get('message')}"
        for error in result.get("errors", [])
    ]


def format_validation_warnings(result: Dict[str, Any]) -> List[str]:
    """One icon-prefixed line per lint warning"""
    lines = []
    for warning in result.get("warnings", []):
        icon = SEVERITY_ICONS.get(warning.get("severity"), SEVERITY_ICONS["info"])
        path = readable_path(warning.get("path"), "General", label_sections=False)
        lines.append(f"{icon} {path}: {warning.get('message')}")
    return lines


def get_validation_summary(result: Dict[str, Any]) -> str:
    """One-line verdict for a validation result"""
    errors = result.get("errors", [])
    warnings = result.get("warnings", [])

    if result.get("valid") and not warnings:
        return "✅ OSCAL document is valid and follows best practices"
    if result.get("valid"):
        return f"✅ OSCAL document is valid with {len(warnings)} suggestion(s)"
    return f"❌ OSCAL validation failed with {len(errors)} error(s)"


class ValidationReporter:
    """Reporter for OSCAL validation results"""

    def __init__(self, result: Dict[str, Any]):
        self.result = result

    def summary(self) -> str:
        return get_validation_summary(self.result)

    def issue_table(self, title: str = "Validation issues") -> Table:
        """Errors followed by warnings as a rich table"""
        table = Table(title=title, show_lines=False)
        table.add_column("Severity", style="bold")
        table.add_column("Location")
        table.add_column("Message")

        for error in self.result.get("errors", []):
            table.add_row(
                Text("error", style="red"),
                Text(readable_path(error.get("path"), "Root")),
                Text(str(error.get("message", "")))
            )

        for warning in self.result.get("warnings", []):
            severity = warning.get("severity", "info")
            colour = "yellow" if severity == "warning" else "cyan"
            table.add_row(
                Text(severity, style=colour),
                Text(readable_path(warning.get("path"), "General", label_sections=False)),
                Text(str(warning.get("message", "")))
            )

        logger.debug(f"Rendered {table.row_count} validation issue(s)")
        return table

    def generate_report(self) -> Dict[str, Any]:
        """Plain-data report suitable for JSON output"""
        return {
            "summary": self.summary(),
            "valid": self.result.get("valid", False),
            "stats": self.result.get("stats", {}),
            "errors": format_validation_errors(self.result),
            "warnings": format_validation_warnings(self.result)
        }
