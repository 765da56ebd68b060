"""
Error handling module for the realty site.

Provides the error taxonomy and a handler that logs failures with context.
"""

from .error_handler import (
    ErrorHandler,
    RealtySiteError,
    StoreError,
    CriteriaError,
    ValidationError,
    NotAuthorizedError,
)

__all__ = [
    'ErrorHandler',
    'RealtySiteError',
    'StoreError',
    'CriteriaError',
    'ValidationError',
    'NotAuthorizedError',
]
