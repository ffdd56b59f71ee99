"""
OSCAL validator using JSON schemas

Validates SSP documents against the bundled OSCAL 1.1.2 SSP schema and runs
the best-practice lint rules. Validation never raises: schema violations are
returned as errors and lint findings as warnings.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema import Draft7Validator, FormatChecker

from .lint_rules import LINT_RULES

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "oscal_ssp_schema.json"


def _pointer_token(part: Any) -> str:
    return str(part).replace("~", "~0").replace("/", "~1")


def json_pointer(parts) -> str:
    """JSON pointer for a path deque; the document root is '/'"""
    tokens = [_pointer_token(part) for part in parts]
    return "/" + "/".join(tokens) if tokens else "/"


@lru_cache(maxsize=None)
def load_validator(schema_path: str) -> Draft7Validator:
    """Load and check a schema once per process"""
    with open(schema_path, 'r', encoding='utf-8') as f:
        schema = json.load(f)

    Draft7Validator.check_schema(schema)
    logger.debug(f"Loaded schema: {schema_path}")

    return Draft7Validator(schema, format_checker=FormatChecker())


class OSCALValidator:
    """Validator for OSCAL SSP documents"""

    def __init__(self, schema_path: Optional[Path] = None):
        self.schema_path = Path(schema_path or DEFAULT_SCHEMA_PATH)

    def _schema_errors(self, candidate: Any) -> List[Dict[str, Any]]:
        validator = load_validator(str(self.schema_path))
        errors = sorted(
            validator.iter_errors(candidate),
            key=lambda e: [str(part) for part in e.absolute_path]
        )

        return [
            {
                "path": json_pointer(error.absolute_path),
                "message": error.message,
                "keyword": error.validator,
                "schema_path": "#/" + "/".join(_pointer_token(p) for p in error.schema_path)
            }
            for error in errors
        ]

    def validate(self, candidate: Any) -> Dict[str, Any]:
        """Validate a candidate document and return the validation result"""
        try:
            errors = self._schema_errors(candidate)
        except (OSError, json.JSONDecodeError, jsonschema.SchemaError) as e:
            logger.error(f"Invalid schema {self.schema_path}: {e}")
            errors = [self._exception_error(f"Schema could not be loaded: {e}")]
        except Exception as e:
            logger.error(f"Validation exception: {e}")
            errors = [self._exception_error(f"Validation exception: {e}")]

        warnings = []
        passed_rules = 0
        for rule in LINT_RULES:
            finding = rule(candidate)
            if finding:
                warnings.append(finding)
            else:
                passed_rules += 1

        valid = not errors
        if valid:
            logger.info(f"OSCAL validation successful ({len(warnings)} warning(s))")
        else:
            logger.warning(f"OSCAL validation failed with {len(errors)} error(s)")

        return {
            "valid": valid,
            "errors": errors,
            "warnings": warnings,
            "stats": {
                "total_checks": 1 + len(LINT_RULES),
                "passed_checks": (1 if valid else 0) + passed_rules,
                "error_count": len(errors),
                "warning_count": len(warnings)
            }
        }

    def _exception_error(self, message: str) -> Dict[str, Any]:
        return {
            "path": "/",
            "message": message,
            "keyword": "exception",
            "schema_path": "#"
        }


def validate_ssp(candidate: Any, schema_path: Optional[Path] = None) -> Dict[str, Any]:
    """Validate a candidate SSP document against the bundled schema"""
    return OSCALValidator(schema_path).validate(candidate)
