"""
OSCAL XML serializer

Renders an SSP graph as OSCAL XML: keys listed in the attribute tables become
attributes, arrays become repeated singular-named elements (inside a grouping
element where OSCAL groups them) and prose fields are wrapped in <p>.
ElementTree escapes text and attribute values.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict

from ..model.oscal import OSCAL_NAMESPACE, ROOT_KEY
from .xml_names import ATTRIBUTES, GROUPED_NAMES, MARKUP_FIELDS, SINGULAR_NAMES, TEXT_VALUES

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _append(parent: ET.Element, key: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, list) and key in GROUPED_NAMES:
        group = ET.SubElement(parent, key)
        for item in value:
            _append_element(group, GROUPED_NAMES[key], item)
    elif isinstance(value, list):
        name = SINGULAR_NAMES.get(key, key)
        for item in value:
            _append_element(parent, name, item)
    else:
        _append_element(parent, key, value)


def _append_element(parent: ET.Element, name: str, value: Any) -> None:
    if value is None:
        return
    element = ET.SubElement(parent, name)
    if isinstance(value, dict):
        _fill(element, name, value)
    elif name in MARKUP_FIELDS:
        paragraph = ET.SubElement(element, "p")
        paragraph.text = _scalar(value)
    else:
        element.text = _scalar(value)


def _fill(element: ET.Element, name: str, obj: Dict[str, Any]) -> None:
    attributes = ATTRIBUTES.get(name, frozenset())
    text_key = TEXT_VALUES.get(name)

    for key, value in obj.items():
        if value is None:
            continue
        if key in attributes and not isinstance(value, (dict, list)):
            element.set(key, _scalar(value))
        elif key == text_key and not isinstance(value, (dict, list)):
            element.text = _scalar(value)
        else:
            _append(element, key, value)


def to_xml(graph: Dict[str, Any]) -> str:
    """Serialize an SSP graph to an OSCAL XML string"""
    ssp = graph.get(ROOT_KEY) if isinstance(graph, dict) else None
    if not isinstance(ssp, dict):
        ssp = {}

    root = ET.Element(ROOT_KEY)
    root.set("xmlns", OSCAL_NAMESPACE)
    _fill(root, ROOT_KEY, ssp)

    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")

    logger.debug(f"Serialized SSP to XML ({len(body)} characters)")
    return f"{XML_DECLARATION}\n{body}\n"
