"""
Flat model mapper

Maps a parsed OSCAL SSP graph back to the flat compliance model. This is the
reverse of SSPMapper. Every lookup tolerates missing structure, and whenever
a value cannot be carried over exactly a human-readable import note is
recorded instead of silently dropping it.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..model.flat import FlatModel, text
from ..model.oscal import (
    CONTACT_ROLE_ID,
    NETWORK_SERVICES_TITLE,
    ORIGINATION_PROP,
    OSCAL_TO_STATUS,
    PERSONNEL_ROLES,
    PLACEHOLDER_CONTROL_REMARKS,
    PLACEHOLDER_INFO_TYPE_DESCRIPTION,
    PLACEHOLDER_NARRATIVE,
    PLACEHOLDER_USER_DESCRIPTION,
    ROLE_ALIASES,
    ROOT_KEY,
    baseline_for_href,
    control_family,
    control_id_to_flat,
)
from .ssp_mapper import CRYPTO_PROPS, SYSTEM_PROPS

logger = logging.getLogger(__name__)

# Personnel role-id -> (flat name field, flat email field, role title)
_PERSONNEL_FIELDS = {
    role_id: (name_field, email_field, title)
    for role_id, title, name_field, email_field in PERSONNEL_ROLES
}


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _dicts(value: Any) -> List[Dict[str, Any]]:
    return [item for item in _list(value) if isinstance(item, dict)]


def _prop(props: Any, name: str) -> Optional[str]:
    """Value of the first prop with the given name"""
    for prop in _dicts(props):
        if prop.get("name") == name:
            return text(prop.get("value"))
    return None


def _impact_base(info_type: Dict[str, Any], key: str) -> Optional[str]:
    impact = _dict(info_type.get(key))
    return text(impact.get("selected")) or text(impact.get("base"))


def _compact(row: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in row.items() if value is not None}


class FlatMapper:
    """Mapper from OSCAL SSP graphs to the flat compliance model"""

    def map(self, graph: Dict[str, Any]) -> Tuple[FlatModel, List[str]]:
        """Return the flat model and the import notes for an SSP graph"""
        ssp = _dict(_dict(graph).get(ROOT_KEY))
        data: FlatModel = {}
        notes: List[str] = []

        logger.info("Mapping OSCAL SSP to flat model")

        self._parse_metadata(_dict(ssp.get("metadata")), data, notes)
        self._parse_import_profile(_dict(ssp.get("import-profile")), data)
        self._parse_system_characteristics(_dict(ssp.get("system-characteristics")), data, notes)
        this_system_uuids = self._parse_system_implementation(
            _dict(ssp.get("system-implementation")), data, notes
        )
        self._parse_control_implementation(
            _dict(ssp.get("control-implementation")), data, notes, this_system_uuids
        )

        logger.info(f"Mapped {len(data)} flat fields with {len(notes)} import note(s)")
        return data, notes

    def _parse_metadata(self, metadata: Dict[str, Any], data: FlatModel, notes: List[str]) -> None:
        """Recover personnel via role-id -> party-uuid -> party"""
        parties = _dicts(metadata.get("parties"))
        party_map = {text(party.get("uuid")): party for party in parties if text(party.get("uuid"))}
        bound_uuids = set()
        contacts = []

        for binding in _dicts(metadata.get("responsible-parties")):
            raw_role = text(binding.get("role-id"))
            if not raw_role:
                notes.append("Skipped a responsible-party binding without a role-id")
                continue
            role_id = ROLE_ALIASES.get(raw_role, raw_role)
            party_uuids = [text(uuid) for uuid in _list(binding.get("party-uuids")) if text(uuid)]
            bound_uuids.update(party_uuids)

            if role_id == CONTACT_ROLE_ID:
                for party_uuid in party_uuids:
                    party = party_map.get(party_uuid)
                    if party:
                        contacts.append(self._contact_row(party))
                    else:
                        notes.append(f"Contact references unknown party {party_uuid}; contact skipped")
                continue

            if role_id not in _PERSONNEL_FIELDS:
                notes.append(f"Role '{raw_role}' has no equivalent personnel field; its parties were not imported")
                continue

            name_field, email_field, title = _PERSONNEL_FIELDS[role_id]
            if not party_uuids:
                notes.append(f"{title} binding lists no parties; {title} left empty")
                continue

            party = party_map.get(party_uuids[0])
            if not party:
                notes.append(f"{title} references unknown party {party_uuids[0]}; {title} left empty")
                continue

            if len(party_uuids) > 1:
                notes.append(f"{title} has {len(party_uuids)} parties; only the first was imported")

            name = text(party.get("name"))
            if name:
                data[name_field] = name
            else:
                notes.append(f"{title} party {party_uuids[0]} has no name; {title} left empty")
            email = text(next(iter(_list(party.get("email-addresses"))), None))
            if email:
                data[email_field] = email

        # People listed without a role binding are kept as additional contacts
        for party in parties:
            if party.get("type") == "person" and text(party.get("uuid")) not in bound_uuids:
                contacts.append(self._contact_row(party))

        contacts = [row for row in contacts if row.get("name")]
        if contacts:
            data["addContacts"] = contacts

        organization = next((p for p in parties if p.get("type") == "organization"), None)
        if organization:
            if text(organization.get("name")):
                data["owningAgency"] = text(organization.get("name"))
            if text(organization.get("short-name")):
                data["agencyComp"] = text(organization.get("short-name"))

    def _contact_row(self, party: Dict[str, Any]) -> Dict[str, Any]:
        phone = next(iter(_dicts(party.get("telephone-numbers"))), {})
        return _compact({
            "name": text(party.get("name")),
            "role": _prop(party.get("props"), "contact-role"),
            "email": text(next(iter(_list(party.get("email-addresses"))), None)),
            "phone": text(phone.get("number"))
        })

    def _parse_import_profile(self, import_profile: Dict[str, Any], data: FlatModel) -> None:
        baseline = baseline_for_href(import_profile.get("href"))
        if baseline:
            data["ctrlBaseline"] = baseline

    def _parse_system_characteristics(self, sys_chars: Dict[str, Any], data: FlatModel,
                                      notes: List[str]) -> None:
        """Recover system information, categorization and narratives"""
        for key, field in [("system-name", "sysName"), ("system-name-short", "sysAcronym"),
                           ("description", "sysDesc")]:
            value = text(sys_chars.get(key))
            if value:
                data[field] = value

        for system_id in _dicts(sys_chars.get("system-ids")):
            identifier = text(system_id.get("id"))
            id_type = (text(system_id.get("identifier-type")) or "").lower()
            if not identifier:
                continue
            if "fedramp" in id_type:
                data.setdefault("fedrampId", identifier)
            elif "rfc4122" in id_type:
                notes.append(f"System identifier {identifier} is a generated UUID; not imported as a FISMA ID")
            elif "fismaId" in data:
                notes.append(f"Additional system identifier {identifier} was not imported")
            else:
                data["fismaId"] = identifier

        props = sys_chars.get("props")
        for field, prop_name in SYSTEM_PROPS:
            value = _prop(props, prop_name)
            if value:
                data[field] = value
        if "fedrampId" not in data and _prop(props, "fedramp-id"):
            data["fedrampId"] = _prop(props, "fedramp-id")

        impact = _dict(sys_chars.get("security-impact-level"))
        sensitivity = text(sys_chars.get("security-sensitivity-level"))
        for key, field in [("security-objective-confidentiality", "conf"),
                           ("security-objective-integrity", "integ"),
                           ("security-objective-availability", "avail")]:
            value = text(impact.get(key))
            if value:
                data[field] = value.lower()
        if not impact and sensitivity:
            data["conf"] = data["integ"] = data["avail"] = sensitivity.lower()
            notes.append(
                f"No security-impact-level; confidentiality, integrity and availability "
                f"derived from sensitivity level '{sensitivity}'"
            )

        info_types = []
        for info_type in _dicts(_dict(sys_chars.get("system-information")).get("information-types")):
            if info_type.get("description") == PLACEHOLDER_INFO_TYPE_DESCRIPTION:
                continue
            categorization = next(iter(_dicts(info_type.get("categorizations"))), {})
            info_types.append(_compact({
                "name": text(info_type.get("title")),
                "nistId": text(next(iter(_list(categorization.get("information-type-ids"))), None)),
                "c": _impact_base(info_type, "confidentiality-impact"),
                "i": _impact_base(info_type, "integrity-impact"),
                "a": _impact_base(info_type, "availability-impact")
            }))
        if info_types:
            data["infoTypes"] = info_types

        for key, field in [("authorization-boundary", "bndNarr"), ("network-architecture", "netNarr"),
                           ("data-flow", "dfNarr")]:
            narrative = text(_dict(sys_chars.get(key)).get("description"))
            if narrative:
                data[field] = narrative

        status = _dict(sys_chars.get("status"))
        if status.get("state") == "operational" and not data.get("opDate"):
            notes.append("System marked as operational but no operational date specified")

    def _parse_system_implementation(self, sys_impl: Dict[str, Any], data: FlatModel,
                                     notes: List[str]) -> List[str]:
        """Recover duties, boundary components, crypto modules and services

        Returns the uuids of this-system components.
        """
        duties = []
        for user in _dicts(sys_impl.get("users")):
            if user.get("description") == PLACEHOLDER_USER_DESCRIPTION:
                continue
            functions = []
            for privilege in _dicts(user.get("authorized-privileges")):
                functions.extend(text(f) for f in _list(privilege.get("functions-performed")) if text(f))
            duties.append(_compact({
                "role": text(user.get("title")),
                "justification": text(user.get("description")),
                "access": ", ".join(functions) or None
            }))
        if duties:
            data["sepDutyMatrix"] = duties

        this_system_uuids = []
        bnd_comps = []
        crypto_mods = []
        pps_rows = []

        for comp in _dicts(sys_impl.get("components")):
            comp_type = text(comp.get("type"))

            for proto in _dicts(comp.get("protocols")):
                port_range = next(iter(_dicts(proto.get("port-ranges"))), {})
                start, end = port_range.get("start"), port_range.get("end")
                port = None
                if start is not None:
                    port = str(start) if end in (None, start) else f"{start}-{end}"
                pps_rows.append(_compact({
                    "svc": text(proto.get("title")) or text(proto.get("name")),
                    "proto": text(proto.get("name")),
                    "port": port
                }))

            if comp_type == "this-system":
                if text(comp.get("uuid")):
                    this_system_uuids.append(text(comp.get("uuid")))
                continue

            if comp_type == "validation":
                row = {"mod": text(comp.get("title")), "usage": text(comp.get("description"))}
                for field, prop_name in CRYPTO_PROPS:
                    row[field] = _prop(comp.get("props"), prop_name)
                crypto_mods.append(_compact(row))
                continue

            if comp_type == "service" and comp.get("title") == NETWORK_SERVICES_TITLE:
                continue

            bnd_comps.append(_compact({
                "name": text(comp.get("title")),
                "type": comp_type,
                "purpose": text(comp.get("description")),
                "zone": _prop(comp.get("props"), "security-zone")
            }))

        if bnd_comps:
            data["bndComps"] = bnd_comps
        if crypto_mods:
            data["cryptoMods"] = crypto_mods
        if pps_rows:
            data["ppsRows"] = pps_rows

        return this_system_uuids

    def _parse_control_implementation(self, ctrl_impl: Dict[str, Any], data: FlatModel,
                                      notes: List[str], this_system_uuids: List[str]) -> None:
        """Recover the family -> control -> record map"""
        ctrl_data: Dict[str, Dict[str, Dict[str, str]]] = {}
        count = 0

        for req in _dicts(ctrl_impl.get("implemented-requirements")):
            raw_id = text(req.get("control-id"))
            if not raw_id:
                notes.append("Skipped an implemented requirement without a control-id")
                continue
            if req.get("remarks") == PLACEHOLDER_CONTROL_REMARKS and not req.get("by-components"):
                continue

            control_id = control_id_to_flat(raw_id)
            component = self._select_by_component(req, control_id, notes, this_system_uuids)

            record: Dict[str, str] = {}
            narrative = text(component.get("description")) or text(req.get("remarks"))
            if narrative and narrative != PLACEHOLDER_NARRATIVE:
                record["narrative"] = narrative

            status = self._map_status(component, control_id, notes)
            if status:
                record["status"] = status

            family = ctrl_data.setdefault(control_family(control_id), {})
            if control_id in family:
                notes.append(f"{control_id} appears more than once; the last entry was kept")
            else:
                count += 1
            family[control_id] = record

        if ctrl_data:
            data["ctrlData"] = ctrl_data
            notes.append(f"Imported {count} control implementation(s)")

    def _select_by_component(self, req: Dict[str, Any], control_id: str, notes: List[str],
                             this_system_uuids: List[str]) -> Dict[str, Any]:
        by_components = _dicts(req.get("by-components"))

        if not by_components:
            # Some tools only document statement-level component narratives
            statement_components = [
                bc for statement in _dicts(req.get("statements"))
                for bc in _dicts(statement.get("by-components"))
            ]
            if not statement_components:
                return {}
            descriptions = [text(bc.get("description")) for bc in statement_components]
            notes.append(f"{control_id} narrative assembled from {len(statement_components)} statement(s)")
            merged = dict(statement_components[0])
            merged["description"] = "\n\n".join(d for d in descriptions if d) or None
            return merged

        if len(by_components) == 1:
            return by_components[0]

        chosen = next(
            (bc for bc in by_components if text(bc.get("component-uuid")) in this_system_uuids),
            by_components[0]
        )
        notes.append(
            f"{control_id} has {len(by_components)} component statements; "
            f"only the one for component {chosen.get('component-uuid')} was imported"
        )
        return chosen

    def _map_status(self, component: Dict[str, Any], control_id: str,
                    notes: List[str]) -> Optional[str]:
        """Reverse the tagged status table, noting states with no flat equivalent"""
        state = text(_dict(component.get("implementation-status")).get("state"))
        if not state:
            return None

        origination = _prop(component.get("props"), ORIGINATION_PROP)
        if state == "implemented" and origination and origination.lower() == "inherited":
            return "inherited"

        status = OSCAL_TO_STATUS.get(state.lower())
        if status is None:
            notes.append(
                f"{control_id} implementation state '{state}' has no equivalent status; status left empty"
            )
        return status


def map_to_flat(graph: Dict[str, Any]) -> Tuple[FlatModel, List[str]]:
    """Map an OSCAL SSP graph to the flat model plus import notes"""
    return FlatMapper().map(graph)
