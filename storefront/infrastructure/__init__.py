"""Infrastructure layer for the Storefront Service: caching, error handling and HTTP transport."""
