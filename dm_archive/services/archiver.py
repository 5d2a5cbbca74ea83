"""
Write side of the archive.
"""
import json
from typing import Any

from dm_archive.core.logging import get_logger
from dm_archive.services.identifiers import encode_npub
from dm_archive.services.keys import build_key
from dm_archive.services.store import ArchiveStore
from dm_archive.services.validator import ensure_direct_message, extract_receiver, validate_event

logger = get_logger(__name__)


def archive_event(store: ArchiveStore, raw: Any) -> str:
    """
    Validate a raw event and store it under its composite key.
    
    - Validates schema, id and signature
    - Requires kind 4
    - npub encodes the author and the first ``p`` tag
    - Overwrites any entry already stored under the same key
    
    Returns:
        The key the event was stored under
    """
    event = validate_event(raw)
    ensure_direct_message(event)
    
    sender = encode_npub(event.pubkey)
    receiver = encode_npub(extract_receiver(event))
    
    key = build_key(sender, receiver, event.created_at)
    store.put(key, json.dumps(raw, separators=(",", ":"), ensure_ascii=False))
    
    logger.info(
        "Archived direct message",
        extra={"extra_data": {"key": key, "event_id": event.id}}
    )
    return key
