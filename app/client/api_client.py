"""
HTTP client for the Water Meter Analytics API.

Separates two failure kinds callers must report differently:
the server could not be reached at all (``ConnectivityFailure``) and the
server answered with an error status (``ServerError``).
"""
import logging
from typing import Any, Dict, Optional

import requests

from app.config import settings

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """Base class for client-observed API failures."""

    def __init__(self, message: str, status: int = 0, url: Optional[str] = None):
        self.message = message
        self.status = status
        self.url = url
        super().__init__(message)


class ConnectivityFailure(ApiClientError):
    """Server unreachable or no response before the client timeout."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message, status=0, url=url)


class ServerError(ApiClientError):
    """Server responded with an error status or an unreadable body."""


def _error_text(response: requests.Response) -> str:
    """Best-effort error string from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason or "Unknown error"
    if isinstance(body, dict):
        error = body.get("error") or body.get("message") or "Unknown error"
        details = body.get("details")
        return f"{error}: {details}" if details else str(error)
    return str(body)[:200]


class MeterApiClient:
    """Thin wrapper around ``requests`` for the ``/api`` endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.CLIENT_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        logger.info(f"MeterApiClient initialized with API URL: {self.base_url}")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def get_json(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> Any:
        """
        GET ``path`` and decode the JSON body.

        Raises:
            ConnectivityFailure: connection refused, DNS failure or timeout
            ServerError: HTTP status >= 400 or a body that is not JSON
        """
        url = self.url_for(path)
        logger.debug(f"GET {url} params={params}")
        try:
            response = self.session.get(
                url,
                params=params,
                timeout=timeout if timeout is not None else self.timeout
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error(f"Cannot connect to {url}: {e}")
            raise ConnectivityFailure(f"Cannot connect to server at {self.base_url}", url=url) from e

        if response.status_code >= 400:
            message = _error_text(response)
            logger.error(f"GET {url} failed with {response.status_code}: {message}")
            raise ServerError(message, status=response.status_code, url=url)

        try:
            return response.json()
        except ValueError as e:
            raise ServerError("Invalid JSON response", status=response.status_code, url=url) from e

    def health(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Call the liveness probe."""
        return self.get_json(
            f"{settings.API_PREFIX}/health",
            timeout=timeout if timeout is not None else settings.HEALTH_TIMEOUT_SECONDS
        )

    def get_all_data(self, page: int = 0, page_size: int = 20) -> Any:
        """One page of the raw readings listing."""
        return self.get_json(
            f"{settings.API_PREFIX}/alldata",
            params={"page": str(page), "pageSize": str(page_size)},
            timeout=settings.DASHBOARD_TIMEOUT_SECONDS
        )
