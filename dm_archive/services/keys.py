"""
Composite storage keys: ``sender:receiver:created_at``.
"""
from typing import NamedTuple, Optional

from dm_archive.core.errors import KeyFormatError

SEPARATOR = ":"


class MessageKey(NamedTuple):
    sender: str
    receiver: str
    timestamp: int


def build_key(sender: str, receiver: str, timestamp: int) -> str:
    """Timestamps are written as plain decimal, without padding."""
    return SEPARATOR.join((sender, receiver, str(timestamp)))


def parse_key(key: str) -> MessageKey:
    """
    Split a stored key back into its parts.
    
    Raises:
        KeyFormatError: if there are fewer than three segments or the
            third is not an integer
    """
    parts = key.split(SEPARATOR)
    if len(parts) < 3:
        raise KeyFormatError(f"Malformed archive key: {key!r}")
    try:
        timestamp = int(parts[2])
    except ValueError as e:
        raise KeyFormatError(f"Malformed timestamp in archive key: {key!r}") from e
    return MessageKey(parts[0], parts[1], timestamp)


def key_prefix(sender: str, receiver: Optional[str] = None) -> str:
    """
    Listing prefix for a sender, or a sender/receiver pair.
    
    Always ends with the separator so one identifier can never match
    keys belonging to a longer one.
    """
    if receiver is None:
        return f"{sender}{SEPARATOR}"
    return f"{sender}{SEPARATOR}{receiver}{SEPARATOR}"
