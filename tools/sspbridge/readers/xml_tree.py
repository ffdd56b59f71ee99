"""
XML parse tree and OSCAL graph coercion

ElementTree output is first converted into a small tagged-union tree of
XmlElement and XmlText nodes. coerce_to_graph() then walks that tree using
the shared naming tables and produces the same dict shape the JSON path
yields. Mapping code only ever sees the coerced graph.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from ..model.oscal import OSCAL_NAMESPACE, ROOT_KEY
from ..serializers.xml_names import (
    GROUPED_NAMES,
    INTEGER_ATTRIBUTES,
    MARKUP_FIELDS,
    PLURAL_NAMES,
    SCALAR_CHILDREN,
    TEXT_VALUES,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class XmlText:
    """Character data between elements"""
    value: str


@dataclass(frozen=True)
class XmlElement:
    """An element with its namespace split from its local name"""
    tag: str
    namespace: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    children: Tuple["XmlNode", ...] = ()

    def elements(self) -> List["XmlElement"]:
        return [child for child in self.children if isinstance(child, XmlElement)]

    def text(self) -> str:
        """Direct character data, ignoring child elements"""
        return "".join(child.value for child in self.children if isinstance(child, XmlText))


XmlNode = Union[XmlElement, XmlText]


def _split_name(name: str) -> Tuple[Optional[str], str]:
    if name.startswith("{"):
        namespace, _, local = name[1:].partition("}")
        return namespace, local
    return None, name


def from_etree(element: ET.Element) -> XmlElement:
    """Convert an ElementTree element into the tagged-union tree"""
    namespace, tag = _split_name(element.tag)
    attributes = {_split_name(key)[1]: value for key, value in element.attrib.items()}

    children: List[XmlNode] = []
    if element.text:
        children.append(XmlText(element.text))
    for child in element:
        children.append(from_etree(child))
        if child.tail:
            children.append(XmlText(child.tail))

    return XmlElement(tag=tag, namespace=namespace, attributes=attributes, children=tuple(children))


def parse_tree(content: Union[bytes, str]) -> XmlElement:
    """Parse XML text into the tagged-union tree; raises ET.ParseError"""
    return from_etree(ET.fromstring(content))


def flatten_markup(element: XmlElement) -> str:
    """Plain text of a markup field; block children are separated by blank lines"""
    blocks = element.elements()
    if not blocks:
        return element.text().strip()

    parts = [element.text().strip()]
    parts.extend(_all_text(block).strip() for block in blocks)
    return "\n\n".join(part for part in parts if part)


def _all_text(element: XmlElement) -> str:
    pieces = []
    for child in element.children:
        if isinstance(child, XmlText):
            pieces.append(child.value)
        else:
            pieces.append(_all_text(child))
    return "".join(pieces)


def _coerce_attribute(key: str, value: str, path: str, notes: List[str]) -> Any:
    if key in INTEGER_ATTRIBUTES:
        try:
            return int(value)
        except ValueError:
            notes.append(f"{path}: attribute '{key}' is not an integer ({value!r}); kept as text")
    return value


def _coerce_element(element: XmlElement, path: str, notes: List[str]) -> Any:
    if element.tag in MARKUP_FIELDS:
        return flatten_markup(element)

    children = element.elements()
    text_key = TEXT_VALUES.get(element.tag)

    if not element.attributes and not children and text_key is None:
        return element.text().strip()

    result: Dict[str, Any] = {
        key: _coerce_attribute(key, value, path, notes)
        for key, value in element.attributes.items()
    }

    direct_text = element.text().strip()
    if text_key is not None:
        result[text_key] = direct_text
    elif direct_text:
        notes.append(f"{path}: text content {direct_text[:40]!r} could not be placed and was ignored")

    scalar_children = SCALAR_CHILDREN.get(element.tag, frozenset())
    for child in children:
        child_path = f"{path}/{child.tag}"
        if child.tag in GROUPED_NAMES:
            result[child.tag] = _coerce_group(child, child_path, notes)
            continue
        value = _coerce_element(child, child_path, notes)
        plural = None if child.tag in scalar_children else PLURAL_NAMES.get(child.tag)
        if plural is not None:
            result.setdefault(plural, []).append(value)
        elif child.tag in result:
            notes.append(f"{child_path}: repeated element; only the first occurrence was kept")
        else:
            result[child.tag] = value

    return result


def _coerce_group(group: XmlElement, path: str, notes: List[str]) -> List[Any]:
    """Items of a grouping element such as <revisions>"""
    item_tag = GROUPED_NAMES[group.tag]
    items = []
    for child in group.elements():
        child_path = f"{path}/{child.tag}"
        if child.tag == item_tag:
            items.append(_coerce_element(child, child_path, notes))
        else:
            notes.append(f"{child_path}: unexpected element inside <{group.tag}> was ignored")
    return items


def coerce_to_graph(root: XmlElement) -> Tuple[Dict[str, Any], List[str]]:
    """Coerce the parse tree into an SSP graph plus coercion notes

    The caller is responsible for checking that the root is an SSP.
    """
    notes: List[str] = []

    if root.namespace != OSCAL_NAMESPACE:
        notes.append(
            f"Root element namespace is {root.namespace or 'missing'}; expected {OSCAL_NAMESPACE}"
        )

    body = _coerce_element(root, root.tag, notes)
    if not isinstance(body, dict):
        body = {}

    logger.debug(f"Coerced XML tree with {len(notes)} note(s)")
    return {ROOT_KEY: body}, notes
