"""
Attribute Records

Mapping-backed records whose fields are discovered from XML payloads.
"""
import threading
from typing import Any, Dict, FrozenSet, Iterable, Iterator, KeysView, Optional, Tuple

from src.vebra.exceptions import ParseError
from src.vebra.parser import XmlFragment, parse
from src.vebra.utils.logger import get_logger

logger = get_logger(__name__)


def merge_attributes(current: Dict[str, Any], incoming: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge parsed fragments onto an attribute mapping.

    Last writer wins: keys present in a later fragment replace earlier values
    whatever their type, keys absent from it are kept.
    """
    merged = dict(current)
    for attributes in incoming:
        merged.update(attributes)
    return merged


class AttributeRecord:
    """
    A record whose fields are whatever its XML payload contained.

    Every key that has ever been in `attributes` gets a read-only accessor,
    so `record.name` returns the live value of `attributes["name"]`.
    Accessors are never removed; once their key is gone they read None, as
    does any other public name that was never supplied. Keys that collide
    with real members (`client`, `attributes`, ...) stay reachable through
    `get()`. Because unknown names read None, a misspelled method name
    yields None rather than AttributeError.

    Subclasses set:
        key_fields: attribute names tried in order for the record identifier
        collection_path: path prefix used when the payload carries no url
        element_name: tag selected from an enrichment response
    """

    key_fields: Tuple[str, ...] = ("id",)
    collection_path: str = ""
    element_name: str = ""

    def __init__(self, fragment: XmlFragment):
        self._lock = threading.Lock()
        self._accessors: set = set()
        self.attributes: Dict[str, Any] = parse(fragment)
        self.derive_accessors()

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not real members.
        if name.startswith("_"):
            raise AttributeError(name)
        return self.__dict__.get("attributes", {}).get(name)

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    def __contains__(self, key: object) -> bool:
        return key in self.attributes

    def __iter__(self) -> Iterator[str]:
        return iter(self.attributes)

    def keys(self) -> KeysView:
        """Current attribute names, so `dict(record)` copies the mapping."""
        return self.attributes.keys()

    def __repr__(self) -> str:
        try:
            identifier = self.record_id
        except ParseError:
            identifier = None
        return f"<{type(self).__name__} id={identifier!r} fields={len(self.attributes)}>"

    @property
    def accessors(self) -> FrozenSet[str]:
        """Names readable as attributes on this record."""
        return frozenset(self._accessors)

    def derive_accessors(self) -> None:
        """Register an accessor for every key that does not have one yet."""
        for key in self.attributes:
            if key in self._accessors:
                continue
            if hasattr(type(self), key) or key in self.__dict__:
                continue
            self._accessors.add(key)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Return the current value for a key, or default if unset."""
        return self.attributes.get(key, default)

    def has(self, key: str) -> bool:
        """Check whether a key currently holds a value."""
        return key in self.attributes

    def to_dict(self) -> dict:
        """Shallow copy of the attribute mapping."""
        return dict(self.attributes)

    @property
    def record_id(self) -> Any:
        """
        Identifier taken from the first key field present.

        Raises:
            ParseError: If the payload carried none of the key fields
        """
        for field in self.key_fields:
            value = self.attributes.get(field)
            if value is not None:
                return value
        raise ParseError(
            f"{type(self).__name__} has none of the key fields {', '.join(self.key_fields)}"
        )

    @property
    def resource_path(self) -> str:
        """The record's own url when the payload has one, else collection/id."""
        url = self.attributes.get("url")
        if url:
            return str(url)
        return f"{self.collection_path}/{self.record_id}"

    def transform(self, attributes: Dict[str, Any]) -> Dict[str, Any]:
        """Hook applied to the merged mapping before accessors are re-derived."""
        return attributes

    def merge(self, fragments: Iterable[Dict[str, Any]]) -> None:
        """
        Merge parsed fragments into this record in place.

        The mapping object is kept, so callers holding `attributes` see the
        new values.
        """
        with self._lock:
            merged = self.transform(merge_attributes(self.attributes, fragments))
            self.attributes.clear()
            self.attributes.update(merged)
            self.derive_accessors()

    def _enrich(self) -> None:
        path = self.resource_path
        response = self.client.call(path)
        elements = response.parsed_response.select(self.element_name)
        if not elements:
            raise ParseError(f"Response for {path} contains no <{self.element_name}> element")
        self.merge([parse(element) for element in elements])
        logger.info(
            "record_enriched",
            record_type=type(self).__name__,
            resource_path=path,
            elements=len(elements),
            fields=len(self.attributes),
        )
