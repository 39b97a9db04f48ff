"""Configuration, exceptions and logging shared across the Storefront Service."""
