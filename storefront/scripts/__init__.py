"""Build-time scripts for the Storefront Service."""
