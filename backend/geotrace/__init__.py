"""Geotrace: LineString trajectory codec, simplification and time lookup."""
