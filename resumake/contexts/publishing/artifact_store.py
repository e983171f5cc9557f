"""
Artifact Store Adapter

Narrow interface between the pipeline and wherever compiled PDFs live:

    upload(key, data, content_type)   overwrite-or-create
    signed_url(key, ttl_seconds)      time-limited read link
    delete(key)                       cascade on document deletion

LocalArtifactStore backs the interface with a directory. Its signed URLs are
file:// URLs carrying an expiry timestamp and an HMAC-SHA256 signature over
"<key>:<expires>", checked by verify_signed_url().
"""

import hashlib
import hmac
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import parse_qs, unquote, urlencode, urlparse

from typing_extensions import Protocol

from resumake.config import StoreConfig
from resumake.contexts.publishing.logger import _log_debug, _log_info

PDF_CONTENT_TYPE = "application/pdf"


class StorageError(Exception):
    """
    Raised when the artifact store rejects or fails an operation.

    Attributes:
        key: Storage key involved, if any
    """

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class ArtifactStore(Protocol):
    def upload(self, key: str, data: bytes, content_type: str) -> None: ...

    def signed_url(self, key: str, ttl_seconds: int) -> str: ...

    def delete(self, key: str) -> None: ...


@dataclass(frozen=True)
class CompiledArtifact:
    """PDF bytes ready for upload, from the engine or the fallback encoder."""

    data: bytes
    storage_key: str
    content_type: str = PDF_CONTENT_TYPE
    used_fallback: bool = False


def artifact_key(owner_id: str, document_id: str) -> str:
    """Deterministic storage key for a document's PDF: '<owner_id>/<document_id>.pdf'."""
    return f"{owner_id}/{document_id}.pdf"


def validate_key(key: str) -> PurePosixPath:
    """
    Check that a key is a relative POSIX path that stays inside the store.

    Raises:
        StorageError: For empty, absolute or parent-escaping keys
    """
    if not key or not key.strip():
        raise StorageError("Storage key must not be empty", key=key)
    if key.startswith("/") or "\\" in key:
        raise StorageError(f"Storage key must be relative: {key}", key=key)
    if any(segment in ("", ".", "..") for segment in key.split("/")):
        raise StorageError(f"Storage key has an empty, '.' or '..' segment: {key}", key=key)
    return PurePosixPath(key)


class LocalArtifactStore:
    """
    Filesystem-backed artifact store.

    Objects are stored at <root>/<key>; content types are kept in a sidecar
    file next to each object.
    """

    def __init__(self, root: Path, signing_secret: str):
        self.root = Path(root).resolve()
        self._secret = signing_secret.encode("utf-8")

    @classmethod
    def from_config(cls, config: StoreConfig) -> "LocalArtifactStore":
        return cls(root=Path(config.root), signing_secret=config.signing_secret)

    def path_for(self, key: str) -> Path:
        return self.root.joinpath(*validate_key(key).parts)

    def upload(self, key: str, data: bytes, content_type: str = PDF_CONTENT_TYPE) -> None:
        """Write data under key, replacing any previous object."""
        target = self.path_for(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # Write then rename so readers never see a partial object
            partial = target.with_name(f".{target.name}.partial")
            partial.write_bytes(data)
            partial.replace(target)
            target.with_name(f"{target.name}.content-type").write_text(content_type, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Upload failed for {key}: {e}", key=key) from e
        _log_info(f"Uploaded {key} ({len(data)} bytes, {content_type})")

    def read(self, key: str) -> bytes:
        try:
            return self.path_for(key).read_bytes()
        except OSError as e:
            raise StorageError(f"Read failed for {key}: {e}", key=key) from e

    def content_type(self, key: str) -> Optional[str]:
        target = self.path_for(key)
        sidecar = target.with_name(f"{target.name}.content-type")
        if not sidecar.exists():
            return None
        return sidecar.read_text(encoding="utf-8")

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def _signature(self, key: str, expires: int) -> str:
        message = f"{key}:{expires}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def signed_url(self, key: str, ttl_seconds: int, now: Optional[float] = None) -> str:
        """
        Issue a time-limited URL for an existing object.

        Raises:
            StorageError: If the object does not exist or ttl_seconds is not positive
        """
        if ttl_seconds <= 0:
            raise StorageError(f"Signed URL lifetime must be positive, got {ttl_seconds}", key=key)
        target = self.path_for(key)
        if not target.is_file():
            raise StorageError(f"Cannot sign missing object: {key}", key=key)

        expires = int(now if now is not None else time.time()) + int(ttl_seconds)
        query = urlencode({"expires": expires, "signature": self._signature(key, expires)})
        _log_debug(f"Signed {key} until {expires}")
        return f"{target.as_uri()}?{query}"

    def verify_signed_url(self, url: str, now: Optional[float] = None) -> bool:
        """True if url was issued by this store, is unexpired and points inside it."""
        parsed = urlparse(url)
        if parsed.scheme != "file":
            return False
        params = parse_qs(parsed.query)
        try:
            expires = int(params["expires"][0])
            signature = params["signature"][0]
        except (KeyError, IndexError, ValueError):
            return False

        try:
            key = Path(unquote(parsed.path)).relative_to(self.root).as_posix()
        except ValueError:
            return False

        current = now if now is not None else time.time()
        if current > expires:
            return False
        return hmac.compare_digest(signature, self._signature(key, expires))

    def delete(self, key: str) -> None:
        """Remove the object under key. Deleting a missing object is not an error."""
        target = self.path_for(key)
        try:
            target.unlink(missing_ok=True)
            target.with_name(f"{target.name}.content-type").unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Delete failed for {key}: {e}", key=key) from e
        _log_info(f"Deleted {key}")
