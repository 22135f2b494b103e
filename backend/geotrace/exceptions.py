"""Exceptions raised by the geometry core."""


class BadGeometryException(ValueError):
    """Raised when a geometry is internally inconsistent or cannot be rendered."""
