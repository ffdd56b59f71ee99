"""
Best-practice lint rules for OSCAL SSP documents

Each rule is a pure function of the candidate document returning a warning
dict or None. Rules never raise and never produce schema errors; add a rule
by appending it to LINT_RULES.
"""

from typing import Any, Callable, Dict, List, Optional

from ..model.oscal import ROOT_KEY

LintWarning = Dict[str, str]
LintRule = Callable[[Any], Optional[LintWarning]]

MIN_DOCUMENTED_CONTROLS = 10

SSP_PATH = f"/{ROOT_KEY}"


def _warning(path: str, message: str, severity: str = "warning") -> LintWarning:
    return {"path": path, "message": message, "severity": severity}


def _ssp(candidate: Any) -> Optional[Dict[str, Any]]:
    if isinstance(candidate, dict) and isinstance(candidate.get(ROOT_KEY), dict):
        return candidate[ROOT_KEY]
    return None


def _section(candidate: Any, name: str) -> Optional[Dict[str, Any]]:
    ssp = _ssp(candidate)
    section = ssp.get(name) if ssp else None
    return section if isinstance(section, dict) else None


def check_root(candidate: Any) -> Optional[LintWarning]:
    if isinstance(candidate, dict) and not isinstance(candidate.get(ROOT_KEY), dict):
        return _warning("/", f"Missing {ROOT_KEY} root element")
    return None


def check_last_modified(candidate: Any) -> Optional[LintWarning]:
    metadata = _section(candidate, "metadata")
    if metadata is not None and not metadata.get("last-modified"):
        return _warning(f"{SSP_PATH}/metadata", "Missing last-modified timestamp in metadata", "info")
    return None


def check_version(candidate: Any) -> Optional[LintWarning]:
    metadata = _section(candidate, "metadata")
    if metadata is not None and not metadata.get("version"):
        return _warning(f"{SSP_PATH}/metadata", "No version specified for the document", "info")
    return None


def check_parties(candidate: Any) -> Optional[LintWarning]:
    metadata = _section(candidate, "metadata")
    if metadata is not None and not metadata.get("parties"):
        return _warning(
            f"{SSP_PATH}/metadata/parties",
            "No responsible parties defined - consider adding system owner and AO"
        )
    return None


def check_system_ids(candidate: Any) -> Optional[LintWarning]:
    characteristics = _section(candidate, "system-characteristics")
    if characteristics is not None and not characteristics.get("system-ids"):
        return _warning(
            f"{SSP_PATH}/system-characteristics/system-ids",
            "No system identifiers defined - required for FedRAMP/FISMA"
        )
    return None


def check_authorization_boundary(candidate: Any) -> Optional[LintWarning]:
    characteristics = _section(candidate, "system-characteristics")
    if characteristics is not None and not characteristics.get("authorization-boundary"):
        return _warning(f"{SSP_PATH}/system-characteristics", "Authorization boundary not defined")
    return None


def check_control_coverage(candidate: Any) -> Optional[LintWarning]:
    control_impl = _section(candidate, "control-implementation")
    if control_impl is None:
        return None

    requirements = control_impl.get("implemented-requirements")
    count = len(requirements) if isinstance(requirements, list) else 0
    path = f"{SSP_PATH}/control-implementation"

    if count == 0:
        return _warning(path, "No control implementations documented")
    if count < MIN_DOCUMENTED_CONTROLS:
        return _warning(path, f"Only {count} controls implemented - consider documenting more", "info")
    return None


def check_import_profile(candidate: Any) -> Optional[LintWarning]:
    ssp = _ssp(candidate)
    if ssp is not None and not ssp.get("import-profile"):
        return _warning(SSP_PATH, "No control baseline profile imported")
    return None


LINT_RULES: List[LintRule] = [
    check_root,
    check_last_modified,
    check_version,
    check_parties,
    check_system_ids,
    check_authorization_boundary,
    check_control_coverage,
    check_import_profile,
]
