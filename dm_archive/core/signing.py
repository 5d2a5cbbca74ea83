"""
Event id and BIP-340 Schnorr signature checks for nostr events.
"""
import hashlib
import json
from typing import Any, List

from coincurve import PublicKeyXOnly


def serialize_event(
    pubkey: str,
    created_at: int,
    kind: int,
    tags: List[List[str]],
    content: str,
) -> bytes:
    """
    Canonical serialization the event id is computed over.
    
    Returns:
        UTF-8 bytes of ``[0, pubkey, created_at, kind, tags, content]``
        as compact JSON
    """
    payload: List[Any] = [0, pubkey, created_at, kind, tags, content]
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compute_event_id(
    pubkey: str,
    created_at: int,
    kind: int,
    tags: List[List[str]],
    content: str,
) -> str:
    """Hex-encoded SHA-256 of the serialized event."""
    return hashlib.sha256(serialize_event(pubkey, created_at, kind, tags, content)).hexdigest()


def verify_signature(pubkey: str, event_id: str, sig: str) -> bool:
    """
    Verify a Schnorr signature over an event id.
    
    Args:
        pubkey: 32-byte x-only public key, hex
        event_id: 32-byte event id, hex
        sig: 64-byte signature, hex
        
    Returns:
        True if the signature is valid, False otherwise (including when
        the public key is not a point on the curve)
    """
    try:
        key = PublicKeyXOnly(bytes.fromhex(pubkey))
        return key.verify(bytes.fromhex(sig), bytes.fromhex(event_id))
    except ValueError:
        return False
