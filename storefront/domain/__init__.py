"""
Domain package for the Storefront Service.

This package contains the unified product model and the per-source schemas
that shape raw upstream payloads into typed records. The domain layer is
independent of HTTP clients and frameworks.
"""
