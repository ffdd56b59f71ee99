"""
OSCAL XML naming tables

Shared by the XML serializer and the XML reader so that both directions
agree on which keys become attributes, how arrays are named and which
fields carry markup.
"""

from typing import Dict, FrozenSet

# JSON array key -> repeated XML element name
SINGULAR_NAMES: Dict[str, str] = {
    "roles": "role",
    "parties": "party",
    "responsible-parties": "responsible-party",
    "responsible-roles": "responsible-role",
    "party-uuids": "party-uuid",
    "location-uuids": "location-uuid",
    "member-of-organizations": "member-of-organization",
    "email-addresses": "email-address",
    "telephone-numbers": "telephone-number",
    "addresses": "address",
    "addr-lines": "addr-line",
    "external-ids": "external-id",
    "document-ids": "document-id",
    "actions": "action",
    "system-ids": "system-id",
    "information-types": "information-type",
    "information-type-ids": "information-type-id",
    "categorizations": "categorization",
    "props": "prop",
    "users": "user",
    "role-ids": "role-id",
    "leveraged-authorizations": "leveraged-authorization",
    "components": "component",
    "inventory-items": "inventory-item",
    "implemented-components": "implemented-component",
    "protocols": "protocol",
    "port-ranges": "port-range",
    "authorized-privileges": "authorized-privilege",
    "functions-performed": "function-performed",
    "implemented-requirements": "implemented-requirement",
    "by-components": "by-component",
    "statements": "statement",
    "provided": "provided",
    "responsibilities": "responsibility",
    "inherited": "inherited",
    "satisfied": "satisfied",
    "links": "link",
    "diagrams": "diagram",
    "resources": "resource",
    "rlinks": "rlink",
    "hashes": "hash",
    "locations": "location",
    "set-parameters": "set-parameter",
    "values": "value",
}

PLURAL_NAMES: Dict[str, str] = {singular: plural for plural, singular in SINGULAR_NAMES.items()}

# JSON array key -> item element name, for arrays wrapped in a grouping element
GROUPED_NAMES: Dict[str, str] = {
    "revisions": "revision",
}

# Element name -> child elements that hold a single value even though the
# same name is repeated elsewhere
SCALAR_CHILDREN: Dict[str, FrozenSet[str]] = {
    "leveraged-authorization": frozenset({"party-uuid"}),
    "location": frozenset({"address"}),
}

# Element name -> scalar keys rendered as XML attributes
ATTRIBUTES: Dict[str, FrozenSet[str]] = {
    "system-security-plan": frozenset({"uuid"}),
    "role": frozenset({"id"}),
    "party": frozenset({"uuid", "type"}),
    "responsible-party": frozenset({"role-id"}),
    "responsible-role": frozenset({"role-id"}),
    "address": frozenset({"type"}),
    "external-id": frozenset({"scheme"}),
    "document-id": frozenset({"scheme"}),
    "action": frozenset({"uuid", "date", "type", "system"}),
    "prop": frozenset({"name", "value", "ns", "class", "group", "uuid"}),
    "link": frozenset({"href", "rel", "media-type", "resource-fragment"}),
    "system-id": frozenset({"identifier-type"}),
    "information-type": frozenset({"uuid"}),
    "categorization": frozenset({"system"}),
    "status": frozenset({"state"}),
    "implementation-status": frozenset({"state"}),
    "user": frozenset({"uuid"}),
    "leveraged-authorization": frozenset({"uuid"}),
    "component": frozenset({"uuid", "type"}),
    "inventory-item": frozenset({"uuid"}),
    "implemented-component": frozenset({"component-uuid"}),
    "protocol": frozenset({"uuid", "name"}),
    "port-range": frozenset({"start", "end", "transport"}),
    "import-profile": frozenset({"href"}),
    "implemented-requirement": frozenset({"uuid", "control-id"}),
    "by-component": frozenset({"uuid", "component-uuid"}),
    "statement": frozenset({"uuid", "statement-id"}),
    "provided": frozenset({"uuid"}),
    "responsibility": frozenset({"uuid", "provided-uuid"}),
    "inherited": frozenset({"uuid", "provided-uuid"}),
    "satisfied": frozenset({"uuid", "responsibility-uuid"}),
    "diagram": frozenset({"uuid"}),
    "resource": frozenset({"uuid"}),
    "rlink": frozenset({"href", "media-type"}),
    "hash": frozenset({"algorithm"}),
    "location": frozenset({"uuid"}),
    "set-parameter": frozenset({"param-id"}),
    "telephone-number": frozenset({"type"}),
}

# Element name -> key whose value is written as the element's text
TEXT_VALUES: Dict[str, str] = {
    "system-id": "id",
    "telephone-number": "number",
    "external-id": "id",
    "document-id": "identifier",
    "hash": "value",
}

# Keys holding markup-multiline prose
MARKUP_FIELDS: FrozenSet[str] = frozenset({"description", "remarks"})

# Attributes that are integers in the JSON model
INTEGER_ATTRIBUTES: FrozenSet[str] = frozenset({"start", "end"})
