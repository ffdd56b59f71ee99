"""
OSCAL validation and reporting

Schema validation of SSP documents against the bundled OSCAL 1.1.2 schema,
best-practice lint rules and human-readable reporting.
"""

from .lint_rules import LINT_RULES
from .oscal_validator import OSCALValidator, validate_ssp
from .validation_reporter import (
    ValidationReporter,
    format_validation_errors,
    format_validation_warnings,
    get_validation_summary,
)

__all__ = [
    'LINT_RULES',
    'OSCALValidator',
    'ValidationReporter',
    'validate_ssp',
    'format_validation_errors',
    'format_validation_warnings',
    'get_validation_summary'
]
