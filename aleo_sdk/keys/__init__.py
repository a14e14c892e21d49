"""
aleo_sdk.keys
=============

Proving/verifying key resolution for program functions.

- :class:`NetworkKeyProvider` fetches keys from remote URIs and caches them.
- :class:`OfflineKeyProvider` serves only keys inserted ahead of time.
- :class:`KeyCache` is the shared, lock-protected store both use.
"""

from .base import FunctionKeyPair, FunctionKeyProvider, KeyResolution
from .cache import CacheEntry, KeyCache
from .credits import CREDITS_PROGRAM_KEYS, KEY_STORE, CreditsKey
from .offline import OfflineKeyProvider
from .params import CachedKeySearch, KeySearchParams, RemoteKeySearch
from .provider import NetworkKeyProvider

__all__ = [
    "FunctionKeyPair",
    "FunctionKeyProvider",
    "KeyResolution",
    "CacheEntry",
    "KeyCache",
    "CREDITS_PROGRAM_KEYS",
    "KEY_STORE",
    "CreditsKey",
    "OfflineKeyProvider",
    "CachedKeySearch",
    "KeySearchParams",
    "RemoteKeySearch",
    "NetworkKeyProvider",
]
