"""Unit tests for the local artifact store."""

from dataclasses import FrozenInstanceError

import pytest

from resumake.config import StoreConfig
from resumake.contexts.publishing.artifact_store import (
    CompiledArtifact,
    LocalArtifactStore,
    StorageError,
    artifact_key,
    validate_key,
)


@pytest.fixture
def store(tmp_path):
    return LocalArtifactStore(root=tmp_path / "artifacts", signing_secret="test-secret")


@pytest.mark.unit
def test_artifact_key_is_deterministic():
    assert artifact_key("user-1", "doc-9") == "user-1/doc-9.pdf"
    assert artifact_key("user-1", "doc-9") == artifact_key("user-1", "doc-9")


@pytest.mark.unit
@pytest.mark.parametrize("key", ["", "  ", "/etc/passwd", "../x.pdf", "a/../../x.pdf", "a\\b.pdf", "./x"])
def test_invalid_keys_rejected(key):
    with pytest.raises(StorageError):
        validate_key(key)


@pytest.mark.unit
def test_upload_and_read(store):
    store.upload("u1/d1.pdf", b"%PDF-1.4 one", "application/pdf")

    assert store.exists("u1/d1.pdf")
    assert store.read("u1/d1.pdf") == b"%PDF-1.4 one"
    assert store.content_type("u1/d1.pdf") == "application/pdf"


@pytest.mark.unit
def test_upload_overwrites(store):
    store.upload("u1/d1.pdf", b"first", "application/pdf")
    store.upload("u1/d1.pdf", b"second", "application/pdf")

    assert store.read("u1/d1.pdf") == b"second"


@pytest.mark.unit
def test_upload_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory", encoding="utf-8")
    store = LocalArtifactStore(root=blocker, signing_secret="s")

    with pytest.raises(StorageError):
        store.upload("u1/d1.pdf", b"x", "application/pdf")


@pytest.mark.unit
def test_signed_url_roundtrip(store):
    store.upload("u1/d1.pdf", b"x", "application/pdf")
    url = store.signed_url("u1/d1.pdf", 3600, now=1_000_000)

    assert url.startswith("file://")
    assert "expires=1003600" in url
    assert store.verify_signed_url(url, now=1_000_000)
    assert store.verify_signed_url(url, now=1_003_600)


@pytest.mark.unit
def test_signed_url_expires(store):
    store.upload("u1/d1.pdf", b"x", "application/pdf")
    url = store.signed_url("u1/d1.pdf", 60, now=1_000_000)

    assert not store.verify_signed_url(url, now=1_000_061)


@pytest.mark.unit
def test_signed_url_tampering_detected(store, tmp_path):
    store.upload("u1/d1.pdf", b"x", "application/pdf")
    url = store.signed_url("u1/d1.pdf", 60, now=1_000_000)

    assert not store.verify_signed_url(url.replace("expires=1000060", "expires=9999999"), now=1_000_000)
    assert not store.verify_signed_url(url.replace("d1.pdf", "d2.pdf"), now=1_000_000)

    other = LocalArtifactStore(root=store.root, signing_secret="different")
    assert not other.verify_signed_url(url, now=1_000_000)


@pytest.mark.unit
def test_signed_url_for_missing_object(store):
    with pytest.raises(StorageError):
        store.signed_url("u1/missing.pdf", 60)


@pytest.mark.unit
def test_signed_url_requires_positive_ttl(store):
    store.upload("u1/d1.pdf", b"x", "application/pdf")

    with pytest.raises(StorageError):
        store.signed_url("u1/d1.pdf", 0)


@pytest.mark.unit
def test_delete(store):
    store.upload("u1/d1.pdf", b"x", "application/pdf")
    store.delete("u1/d1.pdf")

    assert not store.exists("u1/d1.pdf")
    store.delete("u1/d1.pdf")


@pytest.mark.unit
def test_from_config(tmp_path):
    store = LocalArtifactStore.from_config(StoreConfig(root=str(tmp_path / "s"), signing_secret="k"))

    assert store.root == (tmp_path / "s").resolve()


@pytest.mark.unit
def test_compiled_artifact_is_immutable():
    artifact = CompiledArtifact(data=b"%PDF-1.4", storage_key="u/d.pdf")

    assert artifact.content_type == "application/pdf"
    assert not artifact.used_fallback
    with pytest.raises(FrozenInstanceError):
        artifact.data = b""
