"""
XML Attribute Parser

Turns Vebra XML elements into plain attribute mappings.
"""
import re
from typing import Any, Dict, List, Union

from bs4 import BeautifulSoup, Tag

from src.vebra.exceptions import ParseError

XmlFragment = Union[Tag, str, bytes]

INTEGER_PATTERN = re.compile(r"^-?(0|[1-9]\d*)$")
DECIMAL_PATTERN = re.compile(r"^-?(0|[1-9]\d*)\.\d*[1-9]$")
KEY_PATTERN = re.compile(r"[^0-9a-zA-Z_]+")


def normalize_key(name: str) -> str:
    """Lower-case a tag or attribute name and make it a valid identifier."""
    key = KEY_PATTERN.sub("_", name.strip()).lower()
    if key and key[0].isdigit():
        key = f"_{key}"
    return key


def cast_value(text: Any) -> Any:
    """
    Cast leaf text to int or float where it is plainly numeric.

    Values with a leading zero (postcodes, phone numbers) or a trailing
    decimal zero ("1.10") stay strings so their text is preserved.
    """
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    if INTEGER_PATTERN.match(text):
        return int(text)
    if DECIMAL_PATTERN.match(text):
        return float(text)
    return text


def parse_document(text: Union[str, bytes]) -> BeautifulSoup:
    """
    Build an XML document from a response body.

    Raises:
        ParseError: If the body is empty or holds no XML element
    """
    if text is None or not text.strip():
        raise ParseError("Empty XML document")
    soup = BeautifulSoup(text, "xml")
    if soup.find() is None:
        raise ParseError("Response body contains no XML element")
    return soup


def as_element(fragment: XmlFragment) -> Tag:
    """Return the element a fragment stands for, parsing text if needed."""
    if isinstance(fragment, BeautifulSoup):
        element = fragment.find()
    elif isinstance(fragment, Tag):
        element = fragment
    else:
        element = parse_document(fragment).find()
    if element is None:
        raise ParseError("XML fragment contains no element")
    return element


def _child_elements(element: Tag) -> List[Tag]:
    return [child for child in element.children if isinstance(child, Tag)]


def _parse_attrs(element: Tag) -> Dict[str, Any]:
    return {
        normalize_key(name): cast_value(value)
        for name, value in element.attrs.items()
        if not name.startswith("xmlns")
    }


def _parse_children(children: List[Tag]) -> Dict[str, Any]:
    mapping: Dict[str, Any] = {}
    repeated = set()
    for child in children:
        key = normalize_key(child.name)
        value = _parse_node(child)
        if key not in mapping:
            mapping[key] = value
        elif key in repeated:
            mapping[key].append(value)
        else:
            mapping[key] = [mapping[key], value]
            repeated.add(key)
    return mapping


def _parse_node(element: Tag) -> Any:
    attrs = _parse_attrs(element)
    children = _child_elements(element)
    if not children:
        text = cast_value(element.get_text())
        if attrs:
            return {**attrs, "value": text}
        return text
    return {**attrs, **_parse_children(children)}


def parse(fragment: XmlFragment) -> Dict[str, Any]:
    """
    Parse an XML element into an attribute mapping.

    Each child element becomes a key. Leaves map to their (cast) text,
    containers to nested mappings, and repeated sibling tags to a list in
    document order. The element's own XML attributes are merged in, with
    child elements winning on a clash.

    Args:
        fragment: bs4 element, or XML text whose first element is parsed

    Returns:
        Mapping of field name to value
    """
    element = as_element(fragment)
    return {**_parse_attrs(element), **_parse_children(_child_elements(element))}
