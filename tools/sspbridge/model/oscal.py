"""
OSCAL vocabulary shared by the export and import paths

Constants, role vocabulary, implementation-status mapping table and the
control-id case contract live here so that both directions read the same
tables.
"""

import re
from typing import Dict, List, Optional, Tuple

OSCAL_VERSION = "1.1.2"
OSCAL_NAMESPACE = "http://csrc.nist.gov/ns/oscal/1.0"
ROOT_KEY = "system-security-plan"

FEDRAMP_IDENTIFIER_TYPE = "http://fedramp.gov/ns/oscal"
UUID_IDENTIFIER_TYPE = "https://ietf.org/rfc/rfc4122"
SP800_60_SYSTEM = "https://doi.org/10.6028/NIST.SP.800-60v2r1"

UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"
)

IMPACT_LEVELS = ["low", "moderate", "high"]
DEFAULT_IMPACT_LEVEL = "moderate"

_PROFILE_BASE = (
    "https://raw.githubusercontent.com/usnistgov/oscal-content/main/"
    "nist.gov/SP800-53/rev5/json/NIST_SP-800-53_rev5_{}-baseline_profile.json"
)

BASELINE_PROFILES: Dict[str, str] = {
    "low": _PROFILE_BASE.format("LOW"),
    "moderate": _PROFILE_BASE.format("MODERATE"),
    "high": _PROFILE_BASE.format("HIGH"),
    "privacy": _PROFILE_BASE.format("PRIVACY"),
}

# (role-id, title, flat name field, flat email field)
PERSONNEL_ROLES: List[Tuple[str, str, str, str]] = [
    ("system-owner", "System Owner", "soName", "soEmail"),
    ("authorizing-official", "Authorizing Official", "aoName", "aoEmail"),
    ("isso", "Information System Security Officer (ISSO)", "issoName", "issoEmail"),
    ("issm", "Information System Security Manager (ISSM)", "issmName", "issmEmail"),
    ("security-control-assessor", "Security Control Assessor", "scaName", "scaEmail"),
    ("privacy-official", "Privacy Official", "poName", "poEmail"),
]

CONTACT_ROLE_ID = "contact"
CONTACT_ROLE_TITLE = "Additional Point of Contact"

# Role ids other tools use for the same people
ROLE_ALIASES: Dict[str, str] = {
    "information-system-security-officer": "isso",
    "information-system-security-manager": "issm",
    "system-security-officer": "isso",
}

# Flat status -> (canonical state, control-origination side channel)
STATUS_TO_OSCAL: Dict[str, Tuple[str, Optional[str]]] = {
    "implemented": ("implemented", None),
    "partial": ("partial", None),
    "planned": ("planned", None),
    "na": ("not-applicable", None),
    "inherited": ("implemented", "inherited"),
}

STATUS_ALIASES: Dict[str, str] = {
    "implemented": "implemented",
    "complete": "implemented",
    "completed": "implemented",
    "partial": "partial",
    "partiallyimplemented": "partial",
    "inprogress": "partial",
    "planned": "planned",
    "notstarted": "planned",
    "underdevelopment": "planned",
    "na": "na",
    "notapplicable": "na",
    "inherited": "inherited",
    "compensating": "partial",
}

# Canonical state -> flat status; absent states have no flat equivalent
OSCAL_TO_STATUS: Dict[str, str] = {
    "implemented": "implemented",
    "partial": "partial",
    "partially-implemented": "partial",
    "planned": "planned",
    "not-applicable": "na",
}

ORIGINATION_PROP = "control-origination"

PLACEHOLDER_CONTROL_REMARKS = "Control implementations have not yet been documented."
PLACEHOLDER_USER_DESCRIPTION = "General system user"
PLACEHOLDER_INFO_TYPE_DESCRIPTION = "General information processed, stored, or transmitted by the system."
PLACEHOLDER_NARRATIVE = "Implementation not yet documented."
NETWORK_SERVICES_TITLE = "Network Services"

_ENHANCEMENT_FLAT = re.compile(r"\((\d+)\)")
_ENHANCEMENT_OSCAL = re.compile(r"\.(\d+)")


def normalize_status(status) -> Optional[str]:
    """Reduce a free-form status to the flat vocabulary, or None"""
    if not isinstance(status, str) or not status.strip():
        return None
    key = re.sub(r"[\s_\-]", "", status.lower())
    return STATUS_ALIASES.get(key)


def control_id_to_oscal(control_id: str) -> str:
    """AC-2(1) -> ac-2.1"""
    return _ENHANCEMENT_FLAT.sub(r".\1", control_id.strip()).lower()


def control_id_to_flat(control_id: str) -> str:
    """ac-2.1 -> AC-2(1)"""
    return _ENHANCEMENT_OSCAL.sub(r"(\1)", control_id.strip()).upper()


def control_family(control_id: str) -> str:
    """Family code of a flat control id (AC-2(1) -> AC)"""
    return control_id.split("-", 1)[0].upper()


def high_water_mark(*levels) -> str:
    """Highest recognised impact level, defaulting to moderate"""
    ranks = [
        IMPACT_LEVELS.index(level.strip().lower())
        for level in levels
        if isinstance(level, str) and level.strip().lower() in IMPACT_LEVELS
    ]
    if not ranks:
        return DEFAULT_IMPACT_LEVEL
    return IMPACT_LEVELS[max(ranks)]


def baseline_for_href(href: str) -> Optional[str]:
    """Recover the baseline name from a known profile reference"""
    if not isinstance(href, str):
        return None
    for name, url in BASELINE_PROFILES.items():
        if href == url:
            return name
    match = re.search(r"(low|moderate|high|privacy)", href, re.IGNORECASE)
    return match.group(1).lower() if match else None
