"""Tests for the JSON and XML serializers."""

import json
import xml.etree.ElementTree as ET
from datetime import date

import pytest

from sspbridge.mappers import build_ssp
from sspbridge.serializers import export_filename, to_json, to_xml

NS = "{http://csrc.nist.gov/ns/oscal/1.0}"


def test_json_is_indented_and_stable(complete_flat):
    graph = build_ssp(complete_flat)

    first = to_json(graph)
    assert first == to_json(graph)
    assert first.count("\n") > 100
    assert '\n  "system-security-plan": {' in first
    assert json.loads(first) == graph


def test_json_keeps_unicode():
    text = to_json(build_ssp({"sysName": "Système Ünïcode"}))
    assert "Système Ünïcode" in text


def test_xml_declaration_and_root(minimal_flat):
    graph = build_ssp(minimal_flat)
    xml_text = to_xml(graph)

    assert xml_text.startswith('<?xml version="1.0" encoding="UTF-8"?>\n')
    root = ET.fromstring(xml_text)
    assert root.tag == f"{NS}system-security-plan"
    assert root.get("uuid") == graph["system-security-plan"]["uuid"]
    assert root.find(f"{NS}uuid") is None


def test_xml_escapes_text_content():
    xml_text = to_xml(build_ssp({"sysName": "Test & Dev <System>"}))

    assert "&amp;" in xml_text
    assert "&lt;" in xml_text
    assert "Test & Dev <System>" not in xml_text
    root = ET.fromstring(xml_text)
    assert root.find(f"{NS}system-characteristics/{NS}system-name").text == "Test & Dev <System>"


def test_xml_escapes_attribute_quotes():
    graph = build_ssp({"bndComps": [{"name": "Proxy", "zone": 'Zone "A" & <B>'}]})
    xml_text = to_xml(graph)

    assert 'value="Zone &quot;A&quot; &amp; &lt;B&gt;"' in xml_text
    ET.fromstring(xml_text)


def test_xml_arrays_become_repeated_singular_elements(complete_flat):
    root = ET.fromstring(to_xml(build_ssp(complete_flat)))
    metadata = root.find(f"{NS}metadata")

    assert metadata.find(f"{NS}roles") is None
    roles = metadata.findall(f"{NS}role")
    assert roles[0].get("id") == "system-owner"
    assert roles[0].find(f"{NS}title").text == "System Owner"

    components = root.findall(f"{NS}system-implementation/{NS}component")
    assert components[0].get("type") == "this-system"

    requirement = root.find(f"{NS}control-implementation/{NS}implemented-requirement")
    assert requirement.get("control-id") == "ac-1"
    by_component = requirement.find(f"{NS}by-component")
    assert by_component.get("component-uuid") == components[0].get("uuid")
    assert by_component.find(f"{NS}implementation-status").get("state") == "implemented"


def test_xml_special_elements(complete_flat):
    root = ET.fromstring(to_xml(build_ssp(complete_flat)))
    chars = root.find(f"{NS}system-characteristics")

    system_ids = chars.findall(f"{NS}system-id")
    assert system_ids[0].text == "FR-2024-0001"
    assert system_ids[0].get("identifier-type") == "http://fedramp.gov/ns/oscal"

    description = chars.find(f"{NS}description/{NS}p")
    assert description.text == complete_flat["sysDesc"]

    prop = chars.find(f"{NS}prop")
    assert prop.get("name") == "cloud-service-model"
    assert prop.get("value") == "IaaS"

    port_range = root.find(f".//{NS}protocol/{NS}port-range")
    assert port_range.get("start") == "443"


def test_xml_responsible_roles_and_grouped_revisions(minimal_flat):
    graph = build_ssp(minimal_flat)
    ssp = graph["system-security-plan"]
    ssp["metadata"]["revisions"] = [{"version": "1.0"}, {"version": "1.1"}]
    component = ssp["system-implementation"]["components"][0]
    component["responsible-roles"] = [{"role-id": "system-owner", "party-uuids": ["p-1", "p-2"]}]

    root = ET.fromstring(to_xml(graph))

    revisions = root.findall(f"{NS}metadata/{NS}revisions/{NS}revision")
    assert [r.find(f"{NS}version").text for r in revisions] == ["1.0", "1.1"]
    role = root.find(f"{NS}system-implementation/{NS}component/{NS}responsible-role")
    assert role.get("role-id") == "system-owner"
    assert role.find(f"{NS}role-id") is None
    assert [p.text for p in role.findall(f"{NS}party-uuid")] == ["p-1", "p-2"]


def test_xml_uses_two_space_indentation(minimal_flat):
    xml_text = to_xml(build_ssp(minimal_flat))
    assert "\n  <metadata>\n    <title>" in xml_text


def test_xml_of_empty_graph_is_well_formed():
    root = ET.fromstring(to_xml({}))
    assert root.tag == f"{NS}system-security-plan"


def test_export_filename():
    today = date(2024, 5, 1)

    assert export_filename({"sysAcronym": "ERPS"}, "json", today) == "ERPS_OSCAL_2024-05-01.json"
    assert export_filename({}, "xml", today) == "SSP_OSCAL_2024-05-01.xml"
    with pytest.raises(ValueError):
        export_filename({}, "yaml", today)
