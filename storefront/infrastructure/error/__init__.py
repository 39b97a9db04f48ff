"""
Error handling package for the Storefront Service.
Provides centralized error processing and categorization.
"""

from storefront.infrastructure.error.handler import (
    ErrorHandler,
    ErrorDetails,
    ErrorCategory,
    ErrorSeverity
)

__all__ = [
    "ErrorHandler",
    "ErrorDetails",
    "ErrorCategory",
    "ErrorSeverity",
]
