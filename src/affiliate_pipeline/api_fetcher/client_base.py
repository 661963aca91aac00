from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Base error for network-level failures."""


class TransportTimeout(TransportError):
    """Raised when request times out."""


class BaseAPIClient:
    """
    Reusable HTTP transport for external APIs.

    Features:
    - Persistent session
    - Default headers
    - Optional connection-level retries (off by default)
    - Configurable timeout

    Status codes are NOT interpreted here: callers get the raw response
    and decide what counts as success.
    """

    DEFAULT_TIMEOUT = 15  # seconds
    DEFAULT_RETRIES = 0
    DEFAULT_BACKOFF_FACTOR = 0.5

    def __init__(
        self,
        base_url: str,
        default_headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        backoff_factor: Optional[float] = None,
    ) -> None:

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT

        self.session = requests.Session()

        # Default headers
        headers = {
            "User-Agent": "AffiliatePipeline/1.0",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

        if default_headers:
            headers.update(default_headers)

        self.session.headers.update(headers)

        # Non-200 responses are surfaced as-is, never retried on status
        retry_strategy = Retry(
            total=retries if retries is not None else self.DEFAULT_RETRIES,
            backoff_factor=backoff_factor if backoff_factor is not None else self.DEFAULT_BACKOFF_FACTOR,
            status_forcelist=[],
            allowed_methods=["GET"],
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    @property
    def default_headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    # ---------------------------------------------------
    # Core request method
    # ---------------------------------------------------
    def send_get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Send a GET request and return the response untouched.
        Network failures are raised as TransportError / TransportTimeout.
        """

        url = self.build_url(endpoint)
        logger.debug("GET %s params=%s", url, params)

        try:
            return self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise TransportTimeout(
                f"Request timed out calling {url}"
            ) from e
        except requests.RequestException as e:
            raise TransportError(
                f"Request failed calling {url}"
            ) from e
