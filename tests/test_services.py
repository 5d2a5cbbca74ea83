"""
Unit tests for validation, identifier encoding, keys and queries.
"""
import hashlib

import pytest
from coincurve import PrivateKey

from dm_archive.core.errors import (
    EncodingError,
    KeyFormatError,
    MissingParameterError,
    ValidationError,
    WrongKindError,
)
from dm_archive.core.signing import compute_event_id, verify_signature
from dm_archive.models.entry import ArchiveEntry
from dm_archive.services.identifiers import encode_npub
from dm_archive.services.keys import MessageKey, build_key, key_prefix, parse_key
from dm_archive.services.query import QueryEngine
from dm_archive.services.store import SqlArchiveStore
from dm_archive.services.validator import ensure_direct_message, extract_receiver, validate_event


class DictStore:
    """In-memory ArchiveStore that records list calls."""
    
    def __init__(self, keys=()):
        self.data = {key: "{}" for key in keys}
        self.prefixes = []
    
    def put(self, key, value):
        self.data[key] = value
    
    def list(self, prefix):
        self.prefixes.append(prefix)
        return sorted(key for key in self.data if key.startswith(prefix))


class TestEventValidation:
    
    def test_valid_event(self, make_event):
        event = make_event()
        parsed = validate_event(event)
        assert parsed.id == event["id"]
        assert parsed.kind == 4
    
    @pytest.mark.parametrize("raw", [None, [], "event", 4])
    def test_non_object_rejected(self, raw):
        with pytest.raises(ValidationError):
            validate_event(raw)
    
    def test_string_created_at_rejected(self, make_event):
        event = make_event()
        event["created_at"] = str(event["created_at"])
        with pytest.raises(ValidationError):
            validate_event(event)
    
    def test_uppercase_pubkey_rejected(self, make_event):
        event = make_event()
        event["pubkey"] = event["pubkey"].upper()
        with pytest.raises(ValidationError):
            validate_event(event)
    
    def test_non_string_tag_rejected(self, make_event):
        event = make_event()
        event["tags"] = [["p", 1]]
        with pytest.raises(ValidationError):
            validate_event(event)
    
    def test_wrong_id_rejected(self, make_event):
        event = make_event()
        event["id"] = "00" * 32
        with pytest.raises(ValidationError):
            validate_event(event)
    
    def test_unencodable_content_rejected(self, make_event):
        event = make_event()
        event["content"] = "\ud800"
        with pytest.raises(ValidationError):
            validate_event(event)

    
    def test_kind_is_checked_separately(self, make_event):
        """A kind 1 event passes validation and fails the kind policy."""
        parsed = validate_event(make_event(kind=1))
        with pytest.raises(WrongKindError):
            ensure_direct_message(parsed)
    
    def test_receiver_from_first_p_tag(self, make_event):
        parsed = validate_event(make_event(tags=[["e", "x"], ["p", "aa"], ["p", "bb"]]))
        assert extract_receiver(parsed) == "aa"
    
    def test_receiver_missing(self, make_event):
        assert extract_receiver(validate_event(make_event(tags=[]))) == ""
        assert extract_receiver(validate_event(make_event(tags=[["p"]]))) == ""


class TestSigning:
    
    def test_verify_roundtrip(self):
        key = PrivateKey()
        pubkey = key.public_key_xonly.format().hex()
        event_id = compute_event_id(pubkey, 1, 4, [], "")
        sig = key.sign_schnorr(bytes.fromhex(event_id)).hex()
        
        assert verify_signature(pubkey, event_id, sig)
        assert not verify_signature(pubkey, "11" * 32, sig)
    
    def test_point_not_on_curve(self):
        # x >= field prime
        assert not verify_signature("ff" * 32, "11" * 32, "22" * 64)
    
    def test_event_id_uses_compact_json(self):
        expected = hashlib.sha256('[0,"ab",1,4,[["p","cd"]],"hi\\né"]'.encode("utf-8")).hexdigest()
        assert compute_event_id("ab", 1, 4, [["p", "cd"]], "hi\né") == expected


class TestIdentifierCodec:
    
    def test_known_vector(self):
        pubkey = "7e7e9c42a91bfef19fa929e5fda1b72e0ebc1a4c1141673e2794234d86addf4e"
        assert encode_npub(pubkey) == "npub10elfcs4fr0l0r8af98jlmgdh9c8tcxjvz9qkw038js35mp4dma8qzvjptg"
    
    def test_case_insensitive_and_fixed_length(self):
        pubkey = "7e7e9c42a91bfef19fa929e5fda1b72e0ebc1a4c1141673e2794234d86addf4e"
        assert encode_npub(pubkey.upper()) == encode_npub(pubkey)
        assert len(encode_npub(pubkey)) == 63
        assert ":" not in encode_npub(pubkey)
    
    @pytest.mark.parametrize("raw", ["", "abc", "zz" * 32, "aa" * 33, None, 12])
    def test_invalid_input(self, raw):
        with pytest.raises(EncodingError):
            encode_npub(raw)


class TestKeyCodec:
    
    def test_build(self):
        assert build_key("npub1s", "npub1r", 1700000000) == "npub1s:npub1r:1700000000"
    
    def test_timestamp_not_padded(self):
        assert build_key("s", "r", 42) == "s:r:42"
    
    def test_parse(self):
        assert parse_key("npub1s:npub1r:1700000000") == MessageKey("npub1s", "npub1r", 1700000000)
    
    def test_parse_ignores_extra_segments(self):
        assert parse_key("s:r:10:extra") == MessageKey("s", "r", 10)
    
    @pytest.mark.parametrize("key", ["s:r", "s", "s:r:later"])
    def test_parse_malformed(self, key):
        with pytest.raises(KeyFormatError):
            parse_key(key)
    
    def test_prefixes_end_with_separator(self):
        assert key_prefix("s") == "s:"
        assert key_prefix("s", "r") == "s:r:"


class TestQueryEngine:
    
    @pytest.fixture
    def store(self):
        return DictStore(["A:B:100", "A:B:200", "A:C:150", "AA:B:100", "B:A:100"])
    
    def test_counts(self, store):
        assert QueryEngine(store).count_by_receiver("A") == {"B": 2, "C": 1}
    
    def test_counts_since(self, store):
        assert QueryEngine(store).count_by_receiver("A", since=150) == {"B": 1, "C": 1}
    
    def test_counts_receiver(self, store):
        assert QueryEngine(store).count_by_receiver("A", receiver="B") == {"B": 2}
    
    def test_counts_receiver_and_since(self, store):
        assert QueryEngine(store).count_by_receiver("A", receiver="B", since=201) == {}
    
    def test_counts_skip_malformed_keys(self, store):
        store.put("A:D:soon", "{}")
        assert QueryEngine(store).count_by_receiver("A") == {"B": 2, "C": 1}
    
    def test_listing(self, store):
        assert QueryEngine(store).list_conversation("A", "B") == ["A:B:100", "A:B:200"]
        assert store.prefixes == ["A:B:"]
    
    @pytest.mark.parametrize("sender,receiver", [(None, "B"), ("A", None), ("", "B"), (None, None)])
    def test_listing_requires_both(self, store, sender, receiver):
        with pytest.raises(MissingParameterError):
            QueryEngine(store).list_conversation(sender, receiver)
        assert store.prefixes == []
    
    def test_counts_requires_sender(self, store):
        with pytest.raises(MissingParameterError):
            QueryEngine(store).count_by_receiver(None, receiver="B")
        assert store.prefixes == []


class TestSqlArchiveStore:
    
    @pytest.fixture
    def store(self, session_factory):
        db = session_factory()
        yield SqlArchiveStore(db)
        db.close()
    
    def test_list_is_prefix_exact_and_ordered(self, store):
        for key in ("a:b:2", "a:b:10", "A:b:1", "a;b:1", "ab:b:1", "a:", "b:b:1"):
            store.put(key, "{}")
        
        assert store.list("a:") == ["a:", "a:b:10", "a:b:2"]
        assert store.list("a:b:") == ["a:b:10", "a:b:2"]
    
    def test_list_empty_prefix_returns_everything(self, store):
        store.put("b:c:1", "{}")
        store.put("a:c:1", "{}")
        assert store.list("") == ["a:c:1", "b:c:1"]
    
    def test_put_overwrites(self, store, session_factory):
        store.put("a:b:1", "first")
        store.put("a:b:1", "second")
        
        assert store.list("a:b:") == ["a:b:1"]
        db = session_factory()
        try:
            assert db.get(ArchiveEntry, "a:b:1").value == "second"
        finally:
            db.close()
