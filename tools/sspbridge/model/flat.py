"""
Flat compliance model

The flat model is the UI-owned SSP record: a plain dict of optional,
camelCase-keyed fields plus list-of-row collections. Nothing here validates
or mutates it; these helpers only read it safely.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

FlatModel = Dict[str, Any]

# Scalar fields the UI layer may store. Only some of them take part in the
# OSCAL transform; the rest ride along untouched.
FLAT_FIELDS = (
    # System information
    "sysName", "sysAcronym", "fismaId", "fedrampId", "owningAgency", "agencyComp",
    "sysDesc", "cloudModel", "deployModel", "authType", "authDuration", "authSystem",
    "opDate",
    # FIPS 199
    "conf", "integ", "avail", "catJust", "infoTypeJust",
    # Control baseline
    "ctrlBaseline", "tailoring", "baseJust",
    # RMF lifecycle
    "rmfCurrentStep", "rmfTargetAto", "rmfArtifacts", "rmf_prepare", "rmf_categorize",
    "rmf_select", "rmf_implement", "rmf_assess", "rmf_authorize", "rmf_monitor",
    # Boundary, data flow, network
    "bndNarr", "dfNarr", "encRest", "encTransit", "keyMgmt", "dataDisposal",
    "netNarr", "primaryDC", "secondaryDC", "icNotes", "cryptoNarr",
    # Personnel
    "soName", "soEmail", "aoName", "aoEmail", "issoName", "issoEmail",
    "issmName", "issmEmail", "scaName", "scaEmail", "poName", "poEmail",
    # Digital identity
    "ial", "aal", "fal", "mfaMethods", "idNarr",
    # Separation of duties
    "dualControl", "privAccess",
    # Policies and supply chain
    "policyReviewCycle", "policyException", "scrmPlan", "sbomFormat", "provenance",
    # Privacy
    "ptaCollectsPii", "ptaPiiTypes", "ptaRecordCount", "ptaPiaRequired",
    "piaAuthority", "piaPurpose", "piaMinimization", "piaRetention", "piaSharing",
    "piaConsent", "sornStatus", "sornNumber",
    # Contingency, incident response, configuration management
    "cpPurpose", "cpScope", "rto", "rpo", "mtd", "backupFreq", "cpTestDate",
    "cpTestType", "irPurpose", "irScope", "certTime", "irTestDate",
    "cmPurpose", "cmChangeNarr",
    # Continuous monitoring and POA&M
    "iscmType", "ctrlRotation", "iscmNarrative", "sigChangeCriteria", "iscmCadence",
    "atoExpiry", "nextAssessment", "poamFreq", "poamWf",
)

# List-of-row collections and the keys each row may carry
ROW_FIELDS: Dict[str, Tuple[str, ...]] = {
    "levAuths": ("name", "id", "type", "impact"),
    "infoTypes": ("nistId", "name", "c", "i", "a"),
    "tailorRows": ("ctrl", "dec", "rat"),
    "bndComps": ("name", "type", "zone", "purpose"),
    "netZones": ("zone", "purpose", "controls", "subnet"),
    "ppsRows": ("port", "proto", "svc", "purpose", "dir", "dit"),
    "icRows": ("sys", "org", "conn", "dir", "data", "isa"),
    "cryptoMods": ("mod", "cert", "level", "usage", "where"),
    "addContacts": ("name", "role", "email", "phone"),
    "sepDutyMatrix": ("role", "access", "prohibited", "justification"),
    "policyDocs": ("family", "title", "version", "owner", "lastReview", "status"),
    "scrmSuppliers": ("supplier", "type", "criticality", "sbom", "riskLevel"),
    "irSeverity": ("level", "desc", "sla", "notify"),
    "cmBaselines": ("comp", "bench", "ver", "pct", "scan"),
    "cmTools": ("tool", "purpose", "freq", "ctrls"),
    "poamRows": ("id", "weakness", "sev", "ctrl", "status", "due"),
}

CONTROL_FIELD = "ctrlData"

# Narrative keys older records used before "narrative"
_NARRATIVE_KEYS = ("narrative", "implementation", "description")
_RECORD_KEYS = frozenset(("status",) + _NARRATIVE_KEYS)


def text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for blanks and non-strings"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def rows(flat: FlatModel, field: str) -> List[Dict[str, Any]]:
    """Rows of a collection field, skipping anything that is not a dict"""
    value = flat.get(field) if isinstance(flat, dict) else None
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]


def _is_control_record(value: Any) -> bool:
    return isinstance(value, dict) and bool(_RECORD_KEYS.intersection(value))


def iter_controls(flat: FlatModel) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """Yield (control-id, record) from the family -> control -> record map

    A one-level control -> record map from older records is accepted too.
    """
    ctrl_data = flat.get(CONTROL_FIELD) if isinstance(flat, dict) else None
    if not isinstance(ctrl_data, dict):
        return

    for key, value in ctrl_data.items():
        if not isinstance(key, str) or not isinstance(value, dict):
            continue
        if _is_control_record(value):
            yield key, value
            continue
        for control_id, record in value.items():
            if isinstance(control_id, str) and isinstance(record, dict):
                yield control_id, record


def control_narrative(record: Dict[str, Any]) -> Optional[str]:
    """First non-blank narrative under any of the accepted keys"""
    for key in _NARRATIVE_KEYS:
        narrative = text(record.get(key))
        if narrative:
            return narrative
    return None
