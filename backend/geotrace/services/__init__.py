"""Geometry core and application services."""
