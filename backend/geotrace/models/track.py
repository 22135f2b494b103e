"""Track model for storing recorded LineStrings."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, LargeBinary

from geotrace.database import Base


class Track(Base):
    """
    Track model representing a stored trajectory.

    The geometry is kept as WKB; kind and time range are denormalized for filtering.
    """
    __tablename__ = "tracks"

    id = Column(Integer, primary_key=True, index=True)

    # Track details
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False, index=True)  # XY, XYZ, XYM, XYZM
    vertex_count = Column(Integer, nullable=False)
    start_time = Column(Float, nullable=True)  # First time measure, for XYM/XYZM
    end_time = Column(Float, nullable=True)  # Last time measure, for XYM/XYZM

    # Geometry as Well-Known Binary
    wkb = Column(LargeBinary, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Track(id={self.id}, kind={self.kind}, vertices={self.vertex_count}, name='{self.name}')>"
