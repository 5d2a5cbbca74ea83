"""
Inbound event validation.

Schema, id and signature are checked by ``validate_event``. The kind
policy is ``ensure_direct_message`` and raises its own error.
"""
from typing import Any

from pydantic import ValidationError as SchemaError

from dm_archive.core.errors import ValidationError, WrongKindError
from dm_archive.core.signing import compute_event_id, verify_signature
from dm_archive.schemas.event import NostrEvent

DIRECT_MESSAGE_KIND = 4


def validate_event(raw: Any) -> NostrEvent:
    """
    Parse a decoded JSON value into a verified event.
    
    Raises:
        ValidationError: if the shape, id or signature is wrong
    """
    if not isinstance(raw, dict):
        raise ValidationError()
    
    try:
        event = NostrEvent.model_validate(raw)
    except SchemaError as e:
        raise ValidationError() from e
    
    try:
        expected_id = compute_event_id(
            event.pubkey, event.created_at, event.kind, event.tags, event.content
        )
    except UnicodeEncodeError as e:
        # lone surrogates survive json.loads but have no UTF-8 form
        raise ValidationError() from e
    if event.id != expected_id:
        raise ValidationError()
    
    if not verify_signature(event.pubkey, event.id, event.sig):
        raise ValidationError()
    
    return event


def ensure_direct_message(event: NostrEvent) -> None:
    """Raise WrongKindError unless the event is an encrypted DM."""
    if event.kind != DIRECT_MESSAGE_KIND:
        raise WrongKindError()


def extract_receiver(event: NostrEvent) -> str:
    """Hex pubkey from the first ``p`` tag, or "" when there is none."""
    for tag in event.tags:
        if tag and tag[0] == "p":
            return tag[1] if len(tag) > 1 else ""
    return ""
