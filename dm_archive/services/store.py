"""
Key-value archive store.

Handlers depend on the ``ArchiveStore`` protocol only; ``SqlArchiveStore``
is the SQLAlchemy implementation wired in through ``get_store``.
"""
from typing import Annotated, List, Protocol

from fastapi import Depends
from sqlalchemy.orm import Session

from dm_archive.core.database import get_db
from dm_archive.models.entry import ArchiveEntry

# Largest code point; every key starting with a prefix sorts below prefix + this
PREFIX_UPPER_BOUND = "\U0010ffff"


class ArchiveStore(Protocol):
    def put(self, key: str, value: str) -> None: ...
    
    def list(self, prefix: str) -> List[str]: ...


class SqlArchiveStore:
    """ArchiveStore over the ``archive_entries`` table."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def put(self, key: str, value: str) -> None:
        """Insert or overwrite; the last write for a key wins."""
        self.db.merge(ArchiveEntry(key=key, value=value))
        self.db.commit()
    
    def list(self, prefix: str) -> List[str]:
        """Keys starting with ``prefix``, in ascending key order."""
        # Range on the primary key: case-sensitive, unlike LIKE on SQLite
        rows = (
            self.db.query(ArchiveEntry.key)
            .filter(
                ArchiveEntry.key >= prefix,
                ArchiveEntry.key < prefix + PREFIX_UPPER_BOUND,
            )
            .order_by(ArchiveEntry.key.asc())
            .all()
        )
        return [key for (key,) in rows]


def get_store(db: Annotated[Session, Depends(get_db)]) -> ArchiveStore:
    """Dependency providing the request's archive store."""
    return SqlArchiveStore(db)
