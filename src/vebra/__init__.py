"""
Vebra Package

Client and records for the Vebra property-listing API: branches and their
property listings, with fields discovered from the API's XML payloads.
"""
from src.vebra.branch import Branch
from src.vebra.client import ApiClient, ApiResponse
from src.vebra.exceptions import ParseError, TransportError, VebraError
from src.vebra.property import Property

__all__ = [
    "ApiClient",
    "ApiResponse",
    "Branch",
    "Property",
    "ParseError",
    "TransportError",
    "VebraError",
]
