"""
JSON-over-HTTP transport for the Token Layer API.

Each request is issued exactly once; retry policy belongs to the caller.
"""
import logging
from typing import Any, Dict, Optional

import requests

from .exceptions import TokenLayerApiError, TransportError
from .utils import sanitize_payload
from .version import __version__

USER_AGENT = f"tokenlayer-sdk-python/{__version__}"


class HttpTransport:
    """POSTs JSON bodies and maps non-2xx responses to TokenLayerApiError"""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the transport

        Args:
            session: Session to use (a new one is created if omitted)
            timeout: Timeout for HTTP requests in seconds
            logger: Optional logger instance
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def post(self, url: str, body: Dict[str, Any], bearer: Optional[str] = None) -> Dict[str, Any]:
        """
        POST a JSON body

        Args:
            url: Endpoint URL
            body: JSON-serializable request body
            bearer: Token sent as ``Authorization: Bearer <token>`` when given

        Returns:
            Decoded JSON response

        Raises:
            TokenLayerApiError: If the API answers with a non-2xx status
            TransportError: If the request fails or the success body is not JSON
        """
        headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"

        self.logger.debug(f"POST {url}: {sanitize_payload(body)}")
        try:
            response = self.session.post(url, json=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"Token Layer request to {url} failed: {e}")
            raise TransportError(f"Token Layer request failed: {str(e)}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            if not isinstance(payload, dict):
                payload = {"error": f"HTTP {response.status_code} with non-JSON response"}
            self.logger.error(f"Token Layer API error ({response.status_code}): {payload}")
            raise TokenLayerApiError(response.status_code, payload)

        if not isinstance(payload, dict):
            raise TransportError(f"Invalid JSON response from {url} (HTTP {response.status_code})")

        return payload
