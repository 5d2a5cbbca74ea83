"""
Pydantic schemas for the archive's request and response bodies.
"""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, RootModel


HEX32_PATTERN = r"^[a-f0-9]{64}$"
HEX64_PATTERN = r"^[a-f0-9]{128}$"


class NostrEvent(BaseModel):
    """A signed nostr event as received on PUT."""
    
    id: str = Field(..., pattern=HEX32_PATTERN, description="SHA-256 of the serialized event")
    pubkey: str = Field(..., pattern=HEX32_PATTERN, description="Author x-only public key")
    created_at: int = Field(..., ge=0, description="Unix timestamp in seconds")
    kind: int = Field(..., ge=0)
    tags: List[List[str]]
    content: str
    sig: str = Field(..., pattern=HEX64_PATTERN, description="Schnorr signature of id")
    
    model_config = ConfigDict(
        strict=True,
        json_schema_extra={
            "example": {
                "id": "4376c65d2f232afbe9b882a35baa4f6fe8667c4e684749af565f981833ed6a65",
                "pubkey": "6e468422dfb74a5738702a8823b9b28168abab8655faacb6853cd0ee15deee93",
                "created_at": 1673347337,
                "kind": 4,
                "tags": [["p", "7e7e9c42a91bfef19fa929e5fda1b72e0ebc1a4c1141673e2794234d86addf4e"]],
                "content": "ciphertext?iv=...",
                "sig": "908a15e46fb4d8675bab026fc230a0e3542bfade63da02d542fb78b2a8513fcd"
                       "0092619a2c8c1221e581946e0191f2af505dfdf8657a414dbca329186f009262",
            }
        },
    )


class ErrorResponse(BaseModel):
    """Error body for 4xx responses."""
    error: str


class ReceiverCounts(RootModel[Dict[str, int]]):
    """Receiver npub -> number of archived messages."""
