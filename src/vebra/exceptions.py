"""
Vebra Exceptions

Errors raised by the API client and the records built from its responses.
"""
from typing import Optional


class VebraError(Exception):
    """Base class for every error raised by this package."""


class TransportError(VebraError):
    """
    The API call did not complete: network failure or non-success status.

    Attributes:
        status_code: HTTP status of the response, None when no response arrived
        url: URL that was requested
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ParseError(VebraError):
    """A response body could not be decoded into the expected XML structure."""
