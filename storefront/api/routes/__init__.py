"""API route modules for the Storefront Service."""
