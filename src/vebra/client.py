"""
Vebra API Client

Authenticated GET requests against the Vebra property export API.
"""
import base64
import threading
from dataclasses import dataclass, field
from types import TracebackType
from typing import List, Mapping, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from config.settings import settings
from src.vebra.branch import Branch
from src.vebra.exceptions import TransportError
from src.vebra.parser import parse_document
from src.vebra.utils.logger import get_logger

logger = get_logger(__name__)

TOKEN_HEADER = "Token"


@dataclass
class ApiResponse:
    """
    A completed API response.

    `parsed_response` decodes the body on first access and raises
    ParseError if it is not XML.
    """

    status_code: int
    url: str
    content: bytes
    headers: Mapping[str, str] = field(default_factory=dict)
    _document: Optional[BeautifulSoup] = field(default=None, repr=False)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def parsed_response(self) -> BeautifulSoup:
        if self._document is None:
            self._document = parse_document(self.content)
        return self._document


class ApiClient:
    """
    Client for the Vebra export API.

    The first request authenticates with username and password; the token
    the API returns in the `Token` header is used for every later request
    until the API rejects it.
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        datafeed_id: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the API client.

        Args:
            username: API username (defaults to settings.vebra_username)
            password: API password (defaults to settings.vebra_password)
            datafeed_id: Account datafeed ID used in the base URL
            base_url: Override the full base URL (for testing)
            timeout: Request timeout in seconds
        """
        self.username = username or settings.vebra_username
        self.password = password or settings.vebra_password
        self.datafeed_id = datafeed_id or settings.vebra_datafeed_id
        self.base_url = (base_url or self._default_base_url()).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.session = requests.Session()
        self.token: Optional[str] = None
        self._token_lock = threading.Lock()
        logger.info("vebra_client_initialized", base_url=self.base_url)

    def _default_base_url(self) -> str:
        return "/".join([
            settings.vebra_base_url.rstrip("/"),
            str(self.datafeed_id),
            settings.vebra_api_version,
        ])

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def build_url(self, path: str) -> str:
        """Join a resource path onto the base URL; absolute URLs pass through."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _authentication(self) -> Tuple[dict, Optional[Tuple[str, str]], Optional[str]]:
        with self._token_lock:
            token = self.token
        if token:
            encoded = base64.b64encode(token.encode("utf-8")).decode("ascii")
            return {"Authorization": f"Basic {encoded}"}, None, token
        if self.username is None:
            return {}, None, None
        return {}, (self.username, self.password or ""), None

    def _update_token(self, response: requests.Response, used_token: Optional[str]) -> None:
        issued = response.headers.get(TOKEN_HEADER)
        with self._token_lock:
            if issued:
                self.token = issued
                logger.info("api_token_issued")
            elif response.status_code == 401 and used_token and self.token == used_token:
                self.token = None
                logger.info("api_token_expired")

    def call(self, path: str) -> ApiResponse:
        """
        GET a resource.

        Args:
            path: Resource path relative to the base URL, or an absolute URL

        Returns:
            ApiResponse for a 2xx response

        Raises:
            TransportError: If the request fails or the status is not success
        """
        url = self.build_url(path)
        headers, auth, used_token = self._authentication()

        try:
            response = self.session.get(url, headers=headers, auth=auth, timeout=self.timeout)
            self._update_token(response, used_token)
            response.raise_for_status()
        except requests.RequestException as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.warning(
                "api_request_failed",
                url=url,
                status_code=status_code,
                error=str(e),
                error_type=type(e).__name__
            )
            raise TransportError(
                f"GET {url} failed: {e}", status_code=status_code, url=url
            ) from e

        logger.info("api_request_successful", url=url, status_code=response.status_code)
        return ApiResponse(
            status_code=response.status_code,
            url=url,
            content=response.content,
            headers=dict(response.headers),
        )

    def get_branches(self) -> List[Branch]:
        """
        Fetch the account's branch list.

        Returns:
            One Branch per `<branch>` element, sharing this client
        """
        document = self.call(Branch.collection_path).parsed_response
        branches = [Branch(element, self) for element in document.select("branch")]
        logger.info("branches_fetched", count=len(branches))
        return branches
