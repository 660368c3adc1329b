"""
Catalog Exceptions

Errors raised while reading or writing a string catalog. Any of these aborts
the run before the catalog on disk is modified.
"""


class CatalogIOError(Exception):
    """Catalog file error with optional code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class CatalogLoadError(CatalogIOError):
    """The catalog file is unreadable or does not have the catalog shape."""
    pass


class CatalogWriteError(CatalogIOError):
    """The catalog (or its backup) could not be written."""
    pass
