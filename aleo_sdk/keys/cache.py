"""
In-memory store of serialized function keys, keyed by locator.

A locator is ``"<program_id>/<function_name>"`` (or ``"inclusion"``). Each
entry holds the proving and verifying key bytes and a ``sha3-256:<hex>``
digest binding the two together; the digest is checked on every read.

The cache is an ordinary object owned by whoever creates it and handed to the
key providers. Writers are serialized by an internal lock (last writer wins).

On disk the cache is a single JSON document::

    {
      "schema_version": "1",
      "entries": {
        "credits.aleo/join": {
          "proving_key": "<hex>",
          "verifying_key": "<hex>",
          "digest": "sha3-256:<hex>"
        }
      }
    }
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from hashlib import sha3_256
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from ..errors import KeyIntegrityError

log = logging.getLogger(__name__)

SCHEMA_VERSION = "1"


def key_digest(proving_key: bytes, verifying_key: bytes) -> str:
    h = sha3_256()
    # length prefix keeps (a, bc) and (ab, c) apart
    h.update(len(proving_key).to_bytes(8, "big"))
    h.update(proving_key)
    h.update(verifying_key)
    return f"sha3-256:{h.hexdigest()}"


@dataclass(frozen=True, slots=True)
class CacheEntry:
    proving_key: bytes
    verifying_key: bytes
    digest: str

    @classmethod
    def create(cls, proving_key: bytes, verifying_key: bytes) -> "CacheEntry":
        return cls(bytes(proving_key), bytes(verifying_key), key_digest(proving_key, verifying_key))

    def is_intact(self) -> bool:
        return key_digest(self.proving_key, self.verifying_key) == self.digest

    def to_dict(self) -> Dict[str, str]:
        return {
            "proving_key": self.proving_key.hex(),
            "verifying_key": self.verifying_key.hex(),
            "digest": self.digest,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CacheEntry":
        return CacheEntry(
            proving_key=bytes.fromhex(str(d["proving_key"])),
            verifying_key=bytes.fromhex(str(d["verifying_key"])),
            digest=str(d["digest"]),
        )


class KeyCache:
    """Locked mapping of locator -> CacheEntry."""

    def __init__(self) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, locator: object) -> bool:
        with self._lock:
            return locator in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.locators())

    def set(self, locator: str, proving_key: bytes, verifying_key: bytes) -> CacheEntry:
        entry = CacheEntry.create(proving_key, verifying_key)
        with self._lock:
            self._entries[locator] = entry
        log.debug("cached keys for %s (%s)", locator, entry.digest)
        return entry

    def get(self, locator: str) -> Optional[CacheEntry]:
        """Entry for ``locator`` or None; KeyIntegrityError if its digest no longer matches."""
        with self._lock:
            entry = self._entries.get(locator)
        if entry is None:
            return None
        if not entry.is_intact():
            raise KeyIntegrityError(locator, "cached key bytes do not match their digest")
        return entry

    def contains(self, locator: str) -> bool:
        return locator in self

    def delete(self, locator: str) -> bool:
        with self._lock:
            return self._entries.pop(locator, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def locators(self) -> List[str]:
        with self._lock:
            return sorted(self._entries)

    # ---- Persistence ---------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            entries = {loc: e.to_dict() for loc, e in self._entries.items()}
        return {"schema_version": SCHEMA_VERSION, "entries": entries}

    def save(self, path: Union[str, Path]) -> None:
        """Write the cache as JSON, replacing ``path`` atomically."""
        path = Path(path)
        data = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        tmp_fd, tmp_path = tempfile.mkstemp(prefix=path.name, dir=str(path.parent))
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as tmpf:
                tmpf.write(data)
            os.replace(tmp_path, path)
        except Exception:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
            raise
        log.info("saved %d cached key pairs to %s", len(self), path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "KeyCache":
        with Path(path).open("r", encoding="utf-8") as f:
            doc = json.load(f)
        if doc.get("schema_version") != SCHEMA_VERSION:
            raise ValueError(f"unsupported key cache schema: {doc.get('schema_version')!r}")
        cache = cls()
        for locator, raw in (doc.get("entries") or {}).items():
            cache._entries[locator] = CacheEntry.from_dict(raw)
        return cache


__all__ = ["KeyCache", "CacheEntry", "key_digest", "SCHEMA_VERSION"]
