"""
Key-value table backing the archive store.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Text

from dm_archive.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArchiveEntry(Base):
    """One archived event, stored verbatim under its composite key."""
    
    __tablename__ = "archive_entries"
    
    # sender:receiver:created_at
    key = Column(String(255), primary_key=True, nullable=False)
    
    # JSON of the original event
    value = Column(Text, nullable=False)
    
    stored_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
    
    def __repr__(self) -> str:
        return f"<ArchiveEntry(key={self.key})>"
