from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class HttpMethod(str, Enum):
    """Enum defining supported HTTP methods."""
    GET = "GET"
    POST = "POST"


class RequestConfig:
    """Per-request settings for upstream calls."""

    def __init__(self, timeout: Optional[float] = None, source: Optional[str] = None):
        """
        Initialize RequestConfig.

        Args:
            timeout: Request timeout in seconds; the client default when None
            source: Source name attached to errors and log records
        """
        self.timeout = timeout
        self.source = source


class APIConnector(ABC):
    """
    Abstract base interface for API connectors.

    A connector performs one HTTP exchange with an upstream and returns the
    decoded JSON body. Transport problems, non-2xx answers and undecodable
    bodies are raised as ``IntegrationException`` subclasses carrying the
    source, the endpoint and the upstream status.
    """

    @abstractmethod
    async def request(
        self,
        method: HttpMethod,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        config: Optional[RequestConfig] = None,
    ) -> Any:
        """
        Makes an HTTP request and decodes the JSON response.

        Args:
            method: HTTP method to use
            url: URL to make the request to
            params: Optional query parameters
            headers: Optional request headers
            config: Optional request configuration

        Returns:
            Any: Decoded JSON body

        Raises:
            IntegrationException: If the request fails or the body is not JSON
        """
        pass

    async def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        config: Optional[RequestConfig] = None,
    ) -> Any:
        return await self.request(HttpMethod.GET, url, params=params, headers=headers, config=config)

    @staticmethod
    def build_url(base_url: str, path: str) -> str:
        """
        Builds a complete URL from components.

        Args:
            base_url: The base URL of the API
            path: The path to the specific resource

        Returns:
            str: The complete URL
        """
        url = base_url.rstrip('/')
        if path:
            url += f"/{path.lstrip('/')}"
        return url
