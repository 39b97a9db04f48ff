"""HTTP transport for upstream APIs."""

from storefront.infrastructure.http.httpx_connector import HttpxConnector, redact_endpoint

__all__ = ["HttpxConnector", "redact_endpoint"]
