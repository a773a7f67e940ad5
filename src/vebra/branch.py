"""
Branch Records

An estate-agency branch as returned by the Vebra API.
"""
from typing import TYPE_CHECKING, Any, Dict, List

from src.vebra.parser import XmlFragment
from src.vebra.property import Property
from src.vebra.record import AttributeRecord
from src.vebra.utils.logger import get_logger

if TYPE_CHECKING:
    from src.vebra.client import ApiClient

logger = get_logger(__name__)

ADDRESS_FIELDS = ("street", "town", "county", "postcode")


def consolidate_address(attributes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Move the top-level location fields into a nested `address` mapping.

    The mapping always has exactly the four keys; fields the payload lacked
    are None. When none of them are at the top level the values are carried
    over from an existing `address` mapping.
    """
    result = dict(attributes)
    if not any(field in result for field in ADDRESS_FIELDS):
        existing = result.get("address")
        if not isinstance(existing, dict):
            existing = {}
        result["address"] = {field: existing.get(field) for field in ADDRESS_FIELDS}
        return result
    result["address"] = {field: result.pop(field, None) for field in ADDRESS_FIELDS}
    return result


class Branch(AttributeRecord):
    """
    A branch parsed from a `<branch>` summary element.

    Fields are discovered from the XML, so `branch.name`, `branch.firmid`
    and so on exist whenever the payload had them. `get_branch()` fetches
    the full record, `get_properties()` the branch's listings.
    """

    key_fields = ("branchid", "id")
    collection_path = "branch"
    element_name = "branch"

    def __init__(self, fragment: XmlFragment, client: "ApiClient"):
        """
        Initialize the branch from its summary element. No request is made.

        Args:
            fragment: `<branch>` element or its XML text
            client: API client shared by every branch of the account
        """
        self.client = client
        super().__init__(fragment)

    @property
    def branch_id(self) -> Any:
        return self.record_id

    def transform(self, attributes: Dict[str, Any]) -> Dict[str, Any]:
        return consolidate_address(attributes)

    def get_branch(self) -> None:
        """
        Fetch the full branch record and merge it into this branch.

        Raises:
            TransportError: If the request fails
            ParseError: If the response has no `<branch>` element
        """
        self._enrich()

    def get_properties(self) -> List[Property]:
        """
        Fetch the branch's property listings.

        Returns:
            One Property per `<property>` element, in document order

        Raises:
            TransportError: If the request fails
            ParseError: If the response body is not XML
        """
        path = f"{self.resource_path}/property"
        document = self.client.call(path).parsed_response
        elements = document.select("properties property") or document.select("property")
        properties = [Property(element, self) for element in elements]
        logger.info("properties_fetched", resource_path=path, count=len(properties))
        return properties
