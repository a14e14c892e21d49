"""
Key search parameters.

A search is either remote (fetch the prover/verifier from URIs, optionally
caching under ``cache_key``) or cached (look the pair up by locator only).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .credits import credits_key


@dataclass(frozen=True, slots=True)
class RemoteKeySearch:
    prover_uri: str
    verifier_uri: str
    cache_key: Optional[str] = None

    @property
    def locator(self) -> str:
        return self.cache_key or self.prover_uri

    @classmethod
    def for_credits(cls, name: str, key_store: Optional[str] = None) -> "RemoteKeySearch":
        """Search for a built-in credits key, fetching the prover from ``key_store`` if given."""
        k = credits_key(name)
        prover = k.prover
        if key_store:
            prover = key_store.rstrip("/") + "/" + k.prover_file
        return cls(prover_uri=prover, verifier_uri=k.verifier, cache_key=k.locator)


@dataclass(frozen=True, slots=True)
class CachedKeySearch:
    cache_key: str
    verify_credits_keys: bool = False

    @property
    def locator(self) -> str:
        return self.cache_key

    @classmethod
    def for_credits(cls, name: str, *, verify: bool = True) -> "CachedKeySearch":
        return cls(cache_key=credits_key(name).locator, verify_credits_keys=verify)


KeySearchParams = Union[RemoteKeySearch, CachedKeySearch]

__all__ = ["RemoteKeySearch", "CachedKeySearch", "KeySearchParams"]
