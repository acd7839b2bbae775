# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Error kinds raised while archiving stale project cards.
"""


class ArchiverError(Exception):
    """Base class for every error raised by cardarchiver."""


class ConfigurationError(ArchiverError):
    """A required input is missing or malformed."""


class TransportError(ArchiverError):
    """A remote call failed before a usable GraphQL payload came back."""


class APIError(TransportError):
    """GitHub answered, but the GraphQL payload reported errors."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = errors or []


class ProjectNotFound(APIError):
    """No project on the repository matched the configured project name."""


class ColumnNotFound(ArchiverError, LookupError):
    """No column on the project matched the configured column name."""

    def __init__(self, column_name: str, available=None):
        self.column_name = column_name
        self.available = [str(name) for name in available or []]
        super().__init__(f"Column '{column_name}' not found (available: {', '.join(self.available) or 'none'})")
