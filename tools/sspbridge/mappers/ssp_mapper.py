"""
System Security Plan (SSP) mapper

Converts the flat compliance model to an OSCAL SSP v1.1.2 document graph.
Maps system characteristics, FIPS-199 categorization, personnel, boundary
components and control implementations. The mapper never raises on missing
data: required OSCAL structure is filled with safe defaults and optional
structure is omitted.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from ..model.flat import FlatModel, control_narrative, iter_controls, rows, text
from ..model.oscal import (
    BASELINE_PROFILES,
    CONTACT_ROLE_ID,
    CONTACT_ROLE_TITLE,
    FEDRAMP_IDENTIFIER_TYPE,
    NETWORK_SERVICES_TITLE,
    ORIGINATION_PROP,
    PERSONNEL_ROLES,
    PLACEHOLDER_CONTROL_REMARKS,
    PLACEHOLDER_INFO_TYPE_DESCRIPTION,
    PLACEHOLDER_NARRATIVE,
    PLACEHOLDER_USER_DESCRIPTION,
    ROOT_KEY,
    SP800_60_SYSTEM,
    STATUS_TO_OSCAL,
    UUID_IDENTIFIER_TYPE,
    control_id_to_oscal,
    high_water_mark,
    normalize_status,
)
from .base_mapper import BaseMapper, utc_timestamp

logger = logging.getLogger(__name__)

# Flat scalar fields carried as system-characteristics props
SYSTEM_PROPS = [
    ("cloudModel", "cloud-service-model"),
    ("deployModel", "cloud-deployment-model"),
    ("authType", "authorization-type"),
    ("authDuration", "authorization-duration"),
    ("opDate", "operational-date"),
    ("ial", "identity-assurance-level"),
    ("aal", "authenticator-assurance-level"),
    ("fal", "federation-assurance-level"),
]

# Crypto module row keys carried as component props
CRYPTO_PROPS = [
    ("cert", "validation-reference"),
    ("level", "security-level"),
    ("where", "module-location"),
]

_TOKEN_INVALID = re.compile(r"[^a-z0-9_.\-]+")
_PORT_RANGE = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$")


def _token(value: str, default: str) -> str:
    """Reduce free text to an OSCAL token"""
    token = _TOKEN_INVALID.sub("-", value.strip().lower()).strip("-.")
    if not token or not (token[0].isalpha() or token[0] == "_"):
        return default
    return token


def _impact(value: Any, default: str) -> str:
    level = text(value)
    return level.lower() if level else default


class SSPMapper(BaseMapper):
    """Mapper for System Security Plan (SSP) OSCAL artifacts"""

    def map(self, data: FlatModel, **options) -> Dict[str, Any]:
        """Map the flat model to an OSCAL SSP document graph

        Options: document_title, org_name, version, profile_ref.
        """
        flat = data if isinstance(data, dict) else {}
        self.timestamp = utc_timestamp()

        logger.info(f"Mapping flat model to OSCAL SSP ({len(flat)} fields)")

        impact_level = high_water_mark(flat.get("conf"), flat.get("integ"), flat.get("avail"))
        this_system_uuid = self.generate_uuid()

        ssp = {
            ROOT_KEY: {
                "uuid": self.generate_uuid(),
                "metadata": self._build_metadata(flat, options),
                "import-profile": self._build_import_profile(flat, impact_level, options.get("profile_ref")),
                "system-characteristics": self._build_system_characteristics(flat, impact_level),
                "system-implementation": self._build_system_implementation(flat, this_system_uuid),
                "control-implementation": self._build_control_implementation(flat, this_system_uuid)
            }
        }

        return ssp

    def _build_metadata(self, flat: FlatModel, options: Dict[str, Any]) -> Dict[str, Any]:
        """Build OSCAL metadata with roles, parties and responsible parties"""
        system_name = text(flat.get("sysName")) or "Untitled System"
        title = text(options.get("document_title")) or f"System Security Plan - {system_name}"

        roles = [{"id": role_id, "title": title_} for role_id, title_, _, _ in PERSONNEL_ROLES]
        roles.append({"id": CONTACT_ROLE_ID, "title": CONTACT_ROLE_TITLE})

        # The owning organization is always present, even without personnel
        parties = [
            self.create_party(
                name=text(options.get("org_name")) or text(flat.get("owningAgency")) or "Organization",
                party_type="organization",
                short_name=text(flat.get("agencyComp"))
            )
        ]
        responsible_parties = []

        for role_id, _, name_field, email_field in PERSONNEL_ROLES:
            name = text(flat.get(name_field))
            if not name:
                continue
            party = self.create_party(
                name=name,
                party_type="person",
                email=text(flat.get(email_field))
            )
            parties.append(party)
            responsible_parties.append(self.create_responsible_party(role_id, [party["uuid"]]))

        contact_uuids = []
        for contact in rows(flat, "addContacts"):
            name = text(contact.get("name"))
            if not name:
                continue
            role = text(contact.get("role"))
            party = self.create_party(
                name=name,
                party_type="person",
                email=text(contact.get("email")),
                phone=text(contact.get("phone")),
                props=[self.create_property("contact-role", role)] if role else None
            )
            parties.append(party)
            contact_uuids.append(party["uuid"])

        if contact_uuids:
            responsible_parties.append(self.create_responsible_party(CONTACT_ROLE_ID, contact_uuids))

        logger.debug(f"Built {len(parties)} parties and {len(responsible_parties)} role bindings")

        return self.create_oscal_metadata(
            title=title,
            version=text(options.get("version")),
            roles=roles,
            parties=parties,
            responsible_parties=responsible_parties
        )

    def _build_import_profile(self, flat: FlatModel, impact_level: str,
                              profile_ref: Optional[str]) -> Dict[str, Any]:
        """Build import-profile section"""
        href = text(profile_ref)
        if not href:
            baseline = (text(flat.get("ctrlBaseline")) or "").lower()
            matched = next((name for name in BASELINE_PROFILES if name in baseline), None)
            href = BASELINE_PROFILES[matched or impact_level]

        return {"href": href}

    def _build_system_characteristics(self, flat: FlatModel, impact_level: str) -> Dict[str, Any]:
        """Build system-characteristics section"""
        characteristics = {
            "system-ids": self._build_system_ids(flat),
            "system-name": text(flat.get("sysName")) or "Untitled System"
        }

        short_name = text(flat.get("sysAcronym"))
        if short_name:
            characteristics["system-name-short"] = short_name

        characteristics["description"] = text(flat.get("sysDesc")) or "No description provided."

        props = [
            self.create_property(prop_name, text(flat.get(field)))
            for field, prop_name in SYSTEM_PROPS
            if text(flat.get(field))
        ]
        if props:
            characteristics["props"] = props

        characteristics["security-sensitivity-level"] = impact_level
        characteristics["system-information"] = self._build_system_information(flat, impact_level)
        characteristics.update(self.map_fips199_impact_level({
            "confidentiality": _impact(flat.get("conf"), impact_level),
            "integrity": _impact(flat.get("integ"), impact_level),
            "availability": _impact(flat.get("avail"), impact_level)
        }))
        characteristics["status"] = {
            "state": "operational" if text(flat.get("opDate")) else "under-development"
        }
        characteristics["authorization-boundary"] = {
            "description": text(flat.get("bndNarr")) or "Authorization boundary not yet defined."
        }

        network = text(flat.get("netNarr"))
        if network:
            characteristics["network-architecture"] = {"description": network}

        data_flow = text(flat.get("dfNarr"))
        if data_flow:
            characteristics["data-flow"] = {"description": data_flow}

        return characteristics

    def _build_system_ids(self, flat: FlatModel) -> List[Dict[str, Any]]:
        """system-ids is required; fall back to a generated UUID"""
        system_ids = []

        fedramp_id = text(flat.get("fedrampId"))
        if fedramp_id:
            system_ids.append({"identifier-type": FEDRAMP_IDENTIFIER_TYPE, "id": fedramp_id})

        fisma_id = text(flat.get("fismaId"))
        if fisma_id:
            system_ids.append({"id": fisma_id})

        if not system_ids:
            system_ids.append({"identifier-type": UUID_IDENTIFIER_TYPE, "id": self.generate_uuid()})

        return system_ids

    def _build_system_information(self, flat: FlatModel, impact_level: str) -> Dict[str, Any]:
        """Build system-information section"""
        info = {
            "information-types": []
        }

        for info_type in rows(flat, "infoTypes"):
            name = text(info_type.get("name"))
            nist_id = text(info_type.get("nistId"))
            entry = {
                "uuid": self.generate_uuid(),
                "title": name or "Information Type",
                "description": f"Information type: {name or 'General'}. NIST ID: {nist_id or 'Not specified'}."
            }
            if nist_id:
                entry["categorizations"] = [
                    {
                        "system": SP800_60_SYSTEM,
                        "information-type-ids": [nist_id]
                    }
                ]
            entry["confidentiality-impact"] = {"base": _impact(info_type.get("c"), impact_level)}
            entry["integrity-impact"] = {"base": _impact(info_type.get("i"), impact_level)}
            entry["availability-impact"] = {"base": _impact(info_type.get("a"), impact_level)}
            info["information-types"].append(entry)

        # Ensure at least one information type exists (OSCAL requirement)
        if not info["information-types"]:
            info["information-types"].append({
                "uuid": self.generate_uuid(),
                "title": "System Information",
                "description": PLACEHOLDER_INFO_TYPE_DESCRIPTION,
                "confidentiality-impact": {"base": impact_level},
                "integrity-impact": {"base": impact_level},
                "availability-impact": {"base": impact_level}
            })

        return info

    def _build_system_implementation(self, flat: FlatModel, this_system_uuid: str) -> Dict[str, Any]:
        """Build system-implementation section"""
        implementation = {
            "users": self._build_users(flat),
            "components": self._build_components(flat, this_system_uuid)
        }

        return implementation

    def _build_users(self, flat: FlatModel) -> List[Dict[str, Any]]:
        """Build users from the separation of duties matrix"""
        users = []

        for duty in rows(flat, "sepDutyMatrix"):
            role = text(duty.get("role"))
            if not role:
                continue

            user = {
                "uuid": self.generate_uuid(),
                "title": role,
                "role-ids": [_token(role, "user")]
            }
            justification = text(duty.get("justification"))
            if justification:
                user["description"] = justification

            access = text(duty.get("access"))
            if access:
                user["authorized-privileges"] = [
                    {
                        "title": "Role Access",
                        "functions-performed": [access]
                    }
                ]
            users.append(user)

        # Ensure at least one user
        if not users:
            users.append({
                "uuid": self.generate_uuid(),
                "title": "System User",
                "description": PLACEHOLDER_USER_DESCRIPTION
            })

        return users

    def _build_components(self, flat: FlatModel, this_system_uuid: str) -> List[Dict[str, Any]]:
        """Build components; the system itself always comes first"""
        components = [
            {
                "uuid": this_system_uuid,
                "type": "this-system",
                "title": text(flat.get("sysName")) or "System",
                "description": text(flat.get("sysDesc")) or "The information system.",
                "status": {"state": "operational"}
            }
        ]

        for comp in rows(flat, "bndComps"):
            name = text(comp.get("name"))
            if not name:
                continue
            component = {
                "uuid": self.generate_uuid(),
                "type": _token(text(comp.get("type")) or "", "software"),
                "title": name,
                "description": text(comp.get("purpose")) or "System component"
            }
            zone = text(comp.get("zone"))
            if zone:
                component["props"] = [self.create_property("security-zone", zone)]
            component["status"] = {"state": "operational"}
            components.append(component)

        for crypto in rows(flat, "cryptoMods"):
            module = text(crypto.get("mod"))
            if not module:
                continue
            component = {
                "uuid": self.generate_uuid(),
                "type": "validation",
                "title": module,
                "description": text(crypto.get("usage")) or "Cryptographic module",
                "purpose": (
                    f"FIPS 140 Level {text(crypto.get('level')) or 'N/A'}"
                    f" - Certificate: {text(crypto.get('cert')) or 'N/A'}"
                )
            }
            props = [
                self.create_property(prop_name, text(crypto.get(field)))
                for field, prop_name in CRYPTO_PROPS
                if text(crypto.get(field))
            ]
            if props:
                component["props"] = props
            component["status"] = {"state": "operational"}
            components.append(component)

        protocols = self._build_protocols(rows(flat, "ppsRows"))
        if protocols:
            components.append({
                "uuid": self.generate_uuid(),
                "type": "service",
                "title": NETWORK_SERVICES_TITLE,
                "description": "Network services utilized by the system",
                "status": {"state": "operational"},
                "protocols": protocols
            })

        logger.debug(f"Built {len(components)} components")
        return components

    def _build_protocols(self, pps_rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Build protocols from ports, protocols and services rows"""
        protocols = []

        for pps in pps_rows:
            service = text(pps.get("svc"))
            proto = text(pps.get("proto"))
            if not service and not proto:
                continue

            name = proto.upper() if proto else "TCP"
            protocol = {
                "uuid": self.generate_uuid(),
                "name": name,
                "title": service or "Service"
            }

            match = _PORT_RANGE.match(text(pps.get("port")) or "")
            if match and int(match.group(1)) > 0:
                start = int(match.group(1))
                port_range = {
                    "start": start,
                    "end": int(match.group(2)) if match.group(2) else start,
                    "transport": "UDP" if name == "UDP" else "TCP"
                }
                protocol["port-ranges"] = [port_range]

            protocols.append(protocol)

        return protocols

    def _build_control_implementation(self, flat: FlatModel, this_system_uuid: str) -> Dict[str, Any]:
        """Build control-implementation section"""
        implemented_requirements = []

        for control_id, record in iter_controls(flat):
            if not control_id.strip():
                continue

            narrative = control_narrative(record)
            status = normalize_status(record.get("status"))
            if not narrative and not status:
                continue

            by_component = {
                "component-uuid": this_system_uuid,
                "uuid": self.generate_uuid(),
                "description": narrative or PLACEHOLDER_NARRATIVE
            }

            if status:
                state, origination = STATUS_TO_OSCAL[status]
                if origination:
                    by_component["props"] = [self.create_property(ORIGINATION_PROP, origination)]
                by_component["implementation-status"] = {"state": state}
            elif record.get("status"):
                logger.warning(f"Unrecognised status {record.get('status')!r} for {control_id}; omitted")

            implemented_requirements.append({
                "uuid": self.generate_uuid(),
                "control-id": control_id_to_oscal(control_id),
                "by-components": [by_component]
            })

        # OSCAL requires at least one implemented requirement
        if not implemented_requirements:
            implemented_requirements.append({
                "uuid": self.generate_uuid(),
                "control-id": "ac-1",
                "remarks": PLACEHOLDER_CONTROL_REMARKS
            })

        logger.info(f"Mapped {len(implemented_requirements)} implemented requirements")

        return {
            "description": f"Control implementation details for {text(flat.get('sysName')) or 'the system'}",
            "implemented-requirements": implemented_requirements
        }


def build_ssp(flat: FlatModel, **options) -> Dict[str, Any]:
    """Build a fresh OSCAL SSP graph from a flat model"""
    return SSPMapper().map(flat, **options)
