"""
Base API Client with connection pooling, timeouts and error handling.
All HTTP clients (gotchi base traits, etc.) inherit from this.
"""

from abc import ABC
from typing import Optional, Dict, Any, Tuple, Union
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
import logging

from core.constants import API_TIMEOUT_DEFAULT, USER_AGENT

# Get logger - configuration should be done by application entrypoint, not library modules
logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """
    Raised when a remote call fails or returns an unusable payload.

    Attributes:
        status_code: HTTP status, if a response was received
        code: Machine-readable error code from the response body, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        self.status_code = status_code
        self.code = code
        super().__init__(message)


TimeoutType = Union[int, float, Tuple[int, int], Tuple[float, float]]


class BaseAPIClient(ABC):
    """
    Abstract base class for HTTP JSON clients.
    Provides a pooled session, timeouts and uniform error mapping.
    """

    # Connection pool settings (shared across instances)
    POOL_CONNECTIONS = 10  # Number of connection pools to cache
    POOL_MAXSIZE = 20      # Max connections per pool
    MAX_RETRIES = 0        # Single attempt; callers decide how to degrade

    def __init__(
            self,
            base_url: str,
            user_agent: Optional[str] = None,
            timeout: TimeoutType = API_TIMEOUT_DEFAULT,
            session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: Base URL for the API
            user_agent: Custom User-Agent header
            timeout: Request timeout in seconds, or (connect, read)
            session: Pre-built session (tests inject a mock here)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout: TimeoutType = timeout
        self.user_agent = user_agent or USER_AGENT

        self.session = session if session is not None else self._build_session()
        self.session.headers.update({
            'User-Agent': self.user_agent,
            'Accept': 'application/json'
        })

        logger.info(f"Initialized {self.__class__.__name__} - {self.base_url}, timeout: {timeout}")

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        retry_strategy = Retry(
            total=self.MAX_RETRIES,
            allowed_methods=["GET", "POST"],
            raise_on_status=False  # Don't raise, let us handle status codes
        )
        adapter = HTTPAdapter(
            pool_connections=self.POOL_CONNECTIONS,
            pool_maxsize=self.POOL_MAXSIZE,
            max_retries=retry_strategy
        )
        session.mount('https://', adapter)
        session.mount('http://', adapter)
        return session

    @staticmethod
    def _error_details(response: requests.Response) -> Tuple[Optional[str], str]:
        """Extract (code, message) from an error response body, if it has one."""
        try:
            body = response.json()
        except ValueError:
            return None, response.text[:200]
        if isinstance(body, dict):
            return body.get("code"), str(body.get("message") or body)[:200]
        return None, str(body)[:200]

    def _make_request(
            self,
            method: str,
            endpoint: str,
            params: Optional[Dict] = None,
            data: Optional[Dict] = None,
            timeout_override: Optional[TimeoutType] = None,
    ) -> Any:
        """
        Make an HTTP request and decode the JSON body.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (will be appended to base_url)
            params: Query parameters
            data: JSON request body (for POST/PUT)

        Returns:
            Decoded JSON response

        Raises:
            UpstreamError: On transport errors, HTTP status >= 400, or a
                body that is not JSON
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        try:
            logger.debug(f"{method} {url} - params: {params}")

            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=data,
                timeout=(timeout_override if timeout_override is not None else self.timeout)
            )
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise UpstreamError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            code, message = self._error_details(response)
            error_msg = f"API error {response.status_code}: {message}"
            logger.error(error_msg)
            raise UpstreamError(error_msg, status_code=response.status_code, code=code)

        try:
            json_data = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Invalid JSON from {method} {endpoint}", status_code=response.status_code
            ) from e

        logger.info(f"Request successful: {method} {endpoint}")
        return json_data

    def get(self, endpoint: str, params: Optional[Dict] = None,
            timeout_override: Optional[TimeoutType] = None) -> Any:
        """GET request wrapper"""
        return self._make_request('GET', endpoint, params=params, timeout_override=timeout_override)

    def post(self, endpoint: str, data: Optional[Dict] = None, params: Optional[Dict] = None,
             timeout_override: Optional[TimeoutType] = None) -> Any:
        """POST request wrapper"""
        return self._make_request('POST', endpoint, params=params, data=data,
                                  timeout_override=timeout_override)

    def close(self):
        """Clean up resources"""
        self.session.close()
        logger.info(f"Closed {self.__class__.__name__}")

    def __enter__(self):
        """Context manager entry - returns self for use in 'with' blocks."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensures session is closed."""
        self.close()
        return False  # Don't suppress exceptions
