from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

import httpx

from storefront.adapters.interfaces.connector import APIConnector, HttpMethod, RequestConfig
from storefront.core.exceptions import (
    IntegrationException,
    RateLimitError,
    UpstreamAuthenticationError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
)
from storefront.core.logging import get_logger

logger = get_logger(__name__)


def redact_endpoint(url: str) -> str:
    """Drop the query string so tokens passed as parameters never reach logs."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def _retry_after(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("Retry-After")
    if value and value.isdigit():
        return int(value)
    return None


class HttpxConnector(APIConnector):
    """
    APIConnector backed by a shared ``httpx.AsyncClient``.

    The client is owned by the caller (created at application startup and
    closed at shutdown) so connection pools are reused across sources.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def request(
        self,
        method: HttpMethod,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        config: Optional[RequestConfig] = None,
    ) -> Any:
        config = config or RequestConfig()
        endpoint = redact_endpoint(url)
        context: Dict[str, Any] = {"endpoint": endpoint}
        if config.source:
            context["source"] = config.source

        request_kwargs: Dict[str, Any] = {"params": params, "headers": headers}
        if config.timeout is not None:
            request_kwargs["timeout"] = config.timeout

        try:
            response = await self.client.request(method.value, url, **request_kwargs)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"Request to {endpoint} timed out", context=context, original_exception=e
            ) from e
        except httpx.HTTPStatusError as e:
            raise self._status_error(e.response, context, e) from e
        except httpx.RequestError as e:
            raise UpstreamConnectionError(
                f"Failed to connect to {endpoint}", context=context, original_exception=e
            ) from e

        logger.debug(
            f"{method.value} {endpoint} -> {response.status_code}",
            extra={"source": config.source, "upstream_status": response.status_code},
        )

        try:
            return response.json()
        except ValueError as e:
            context["upstream_status"] = response.status_code
            raise IntegrationException(
                f"Response from {endpoint} is not valid JSON",
                code="invalid_response",
                context=context,
                original_exception=e,
            ) from e

    @staticmethod
    def _status_error(
        response: httpx.Response,
        context: Dict[str, Any],
        original: Exception,
    ) -> IntegrationException:
        status_code = response.status_code
        context["upstream_status"] = status_code
        endpoint = context["endpoint"]

        if status_code == 429:
            return RateLimitError(
                f"Rate limited by {endpoint}",
                retry_after=_retry_after(response),
                context=context,
            )
        if status_code in (401, 403):
            return UpstreamAuthenticationError(
                f"{endpoint} rejected credentials ({status_code})", context=context
            )
        # The original httpx error text repeats the full URL, query included
        return IntegrationException(
            f"{endpoint} responded with HTTP {status_code}", context=context
        )
