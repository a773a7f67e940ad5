"""
Property Records

A listing belonging to a branch.
"""
from typing import TYPE_CHECKING, Any

from src.vebra.parser import XmlFragment
from src.vebra.record import AttributeRecord

if TYPE_CHECKING:
    from src.vebra.branch import Branch
    from src.vebra.client import ApiClient


class Property(AttributeRecord):
    """
    A property parsed from a `<property>` element of a listings response.

    Keeps a reference to its branch, whose client and path it uses.
    """

    key_fields = ("prop_id", "propid", "id")
    element_name = "property"

    def __init__(self, fragment: XmlFragment, branch: "Branch"):
        self.branch = branch
        super().__init__(fragment)

    @property
    def client(self) -> "ApiClient":
        return self.branch.client

    @property
    def property_id(self) -> Any:
        return self.record_id

    @property
    def resource_path(self) -> str:
        url = self.attributes.get("url")
        if url:
            return str(url)
        return f"{self.branch.resource_path}/property/{self.record_id}"

    def get_property(self) -> None:
        """
        Fetch the full property record and merge it in.

        Raises:
            TransportError: If the request fails
            ParseError: If the response has no `<property>` element
        """
        self._enrich()
