"""Database models for Geotrace."""
from geotrace.models.track import Track

__all__ = ["Track"]
