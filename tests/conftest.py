"""
Shared fixtures: a throwaway SQLite archive and signed event factories.
"""
import pytest
from coincurve import PrivateKey
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from dm_archive.main import app
from dm_archive.core.database import Base, get_db
from dm_archive.core.signing import compute_event_id
from dm_archive.models import entry  # noqa: F401 - Import to register models


def xonly_hex(key: PrivateKey) -> str:
    return key.public_key_xonly.format().hex()


@pytest.fixture(scope="function")
def session_factory(tmp_path):
    """Fresh SQLite archive for each test, wired into the app."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test_archive.db'}",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    
    def override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()
    
    app.dependency_overrides[get_db] = override_get_db
    
    yield TestSessionLocal
    
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    app.dependency_overrides.clear()


@pytest.fixture
def client(session_factory):
    return TestClient(app)


@pytest.fixture
def sender_key() -> PrivateKey:
    return PrivateKey()


@pytest.fixture
def receiver_key() -> PrivateKey:
    return PrivateKey()


@pytest.fixture
def make_event(sender_key, receiver_key):
    """Factory for signed events; defaults to a kind 4 DM to receiver_key."""
    def _make(key=None, kind=4, tags=None, created_at=1700000000, content="c2VjcmV0?iv=aXY="):
        key = key or sender_key
        if tags is None:
            tags = [["p", xonly_hex(receiver_key)]]
        pubkey = xonly_hex(key)
        event_id = compute_event_id(pubkey, created_at, kind, tags, content)
        return {
            "id": event_id,
            "pubkey": pubkey,
            "created_at": created_at,
            "kind": kind,
            "tags": tags,
            "content": content,
            "sig": key.sign_schnorr(bytes.fromhex(event_id)).hex(),
        }
    return _make


@pytest.fixture
def sender_npub(sender_key) -> str:
    from dm_archive.services.identifiers import encode_npub
    return encode_npub(xonly_hex(sender_key))


@pytest.fixture
def receiver_npub(receiver_key) -> str:
    from dm_archive.services.identifiers import encode_npub
    return encode_npub(xonly_hex(receiver_key))
