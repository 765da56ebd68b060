"""
Realty Site - search and back office for a real-estate marketing website.

Data persistence, authentication and file storage are delegated to an
external hosted backend; this package composes queries against it.
"""

__version__ = "0.1.0"
