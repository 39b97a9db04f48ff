"""
Adapters package for the Storefront Service.

This package contains components for integrating with upstream storefront APIs:
- Abstract interfaces that define the contracts for sources
- Concrete source implementations for each platform
- Factory and registry for building the configured sources
"""
