"""
Database models for redaction presets.

A preset is a named set of PII categories a user wants selected when
reviewing detections.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_uuid():
    """Generate UUID string for primary keys."""
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class Preset(Base):
    """Named category selection owned by a user."""

    __tablename__ = 'presets'

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    categories = Column(JSON, nullable=False, default=list)
    user_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Preset(id={self.id}, name={self.name}, categories={self.categories})>"

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'categories': list(self.categories or []),
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
