"""
Read side of the archive: conversation listing and per-receiver counts.
"""
from collections import Counter
from typing import Dict, List, Optional

from dm_archive.core.errors import KeyFormatError, MissingParameterError
from dm_archive.core.logging import get_logger
from dm_archive.services.keys import key_prefix, parse_key
from dm_archive.services.store import ArchiveStore

logger = get_logger(__name__)


class QueryEngine:
    """
    Builds key prefixes from query parameters and filters what the store
    lists under them.
    
    Parameters are checked before the store is touched.
    """
    
    def __init__(self, store: ArchiveStore):
        self.store = store
    
    def list_conversation(self, sender: Optional[str], receiver: Optional[str]) -> List[str]:
        """
        All keys archived from ``sender`` to ``receiver``.
        
        Keys come back in the store's lexicographic order, which is not
        chronological once timestamps differ in digit count.
        
        Raises:
            MissingParameterError: if either identifier is missing
        """
        if not sender or not receiver:
            raise MissingParameterError("Both sender and receiver must be provided")
        
        keys = self.store.list(key_prefix(sender, receiver))
        logger.debug(
            "Listed conversation",
            extra={"extra_data": {"sender": sender, "receiver": receiver, "returned": len(keys)}}
        )
        return keys
    
    def count_by_receiver(
        self,
        sender: Optional[str],
        receiver: Optional[str] = None,
        since: Optional[int] = None,
    ) -> Dict[str, int]:
        """
        Count messages from ``sender`` grouped by receiver.
        
        - **receiver**: keep only this receiver
        - **since**: keep only keys with timestamp >= since
        
        Raises:
            MissingParameterError: if sender is missing
        """
        if not sender:
            raise MissingParameterError("sender must be provided")
        
        counts: Counter = Counter()
        for key in self.store.list(key_prefix(sender)):
            try:
                parsed = parse_key(key)
            except KeyFormatError as e:
                logger.warning(f"Skipping unparseable key: {e}")
                continue
            
            if receiver is not None and parsed.receiver != receiver:
                continue
            if since is not None and parsed.timestamp < since:
                continue
            counts[parsed.receiver] += 1
        
        logger.debug(
            "Counted messages",
            extra={"extra_data": {"sender": sender, "receivers": len(counts)}}
        )
        return dict(counts)
