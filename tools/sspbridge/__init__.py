"""
sspbridge - bidirectional OSCAL System Security Plan transforms

Converts the flat compliance model edited by a UI into OSCAL 1.1.2 SSP
documents (JSON or XML) and imports OSCAL SSPs back into the flat model.

Architecture:
    Export: flat model → SSPMapper → OSCAL graph → Validator → JSON / XML
    Import: JSON / XML → Reader → OSCAL graph → Validator + FlatMapper → flat model

Every exported document is checked against the OSCAL 1.1.2 SSP schema and a
set of best-practice lint rules. Import never rejects a well-formed but
non-conformant document; it reports what could not be carried over.
"""

__version__ = "1.0.0"
__author__ = "sspbridge contributors"
__license__ = "Apache-2.0"

from .pipeline import generate_and_validate, import_and_report

__all__ = ['generate_and_validate', 'import_and_report']
