"""HTTP API layer for the Storefront Service."""
