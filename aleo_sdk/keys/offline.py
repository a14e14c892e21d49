"""
Offline function-key resolution.

An ``OfflineKeyProvider`` never touches the network: every key pair must be
inserted up front (or loaded from a saved ``KeyCache``). Built-in credits keys
can only be inserted if the engine recognizes the proving key as the genuine
one for that function; the verifying key always comes from the engine.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union

from ..errors import AleoSdkError, KeyIntegrityError, KeyNotFoundError
from .base import CreditsKeysMixin, FunctionKeyPair, KeyResolution, resolve
from .cache import KeyCache
from .credits import CREDITS_PROGRAM_KEYS, by_locator
from .params import CachedKeySearch, KeySearchParams

log = logging.getLogger(__name__)


class OfflineKeyProvider(CreditsKeysMixin):
    def __init__(self, engine: Any, *, cache: Optional[KeyCache] = None) -> None:
        self._engine = engine
        self._cache = cache if cache is not None else KeyCache()
        # RemoteKeySearch has no strategy here and is rejected as invalid.
        self._strategies = (self._resolve_cached,)

    @classmethod
    def from_file(cls, engine: Any, path: Union[str, Path]) -> "OfflineKeyProvider":
        return cls(engine, cache=KeyCache.load(path))

    @property
    def cache(self) -> KeyCache:
        return self._cache

    def function_keys(self, params: KeySearchParams) -> FunctionKeyPair:
        return resolve(self._strategies, params)

    def credits_keys(self, name: str) -> FunctionKeyPair:
        return self.function_keys(CachedKeySearch.for_credits(name, verify=True))

    def _resolve_cached(self, params: KeySearchParams) -> Optional[KeyResolution]:
        if not isinstance(params, CachedKeySearch):
            return None
        try:
            pair = self.get_keys(params.cache_key)
            if params.verify_credits_keys:
                self._verify_credits_pair(params.cache_key, pair)
        except AleoSdkError as e:
            return KeyResolution.fail(e)
        return KeyResolution.ok(pair)

    def _verify_credits_pair(self, locator: str, pair: FunctionKeyPair) -> None:
        entry = by_locator(locator)
        if entry is None:
            raise KeyIntegrityError(locator, "not a built-in credits.aleo locator")
        proving_key, verifying_key = pair
        if not (proving_key.is_prover_for(entry.name) and verifying_key.is_verifier_for(entry.name)):
            raise KeyIntegrityError(locator)

    # ---- Insertion -----------------------------------------------------------

    def insert_credits_proving_key(self, name: str, proving_key: Any) -> None:
        """
        Cache ``proving_key`` for the credits.aleo function ``name``.

        The key is rejected with KeyIntegrityError (cache untouched) unless the
        engine identifies it as that function's prover.
        """
        entry = CREDITS_PROGRAM_KEYS.get(name)
        if entry is None:
            raise KeyIntegrityError(name, "not a built-in credits.aleo function")
        if not proving_key.is_prover_for(name):
            raise KeyIntegrityError(entry.locator, f"proving key is not the {name} prover")
        verifying_key = self._engine.credits_verifying_key(name)
        self._cache.set(entry.locator, proving_key.to_bytes(), verifying_key.to_bytes())
        log.info("inserted offline keys for %s", entry.locator)

    def insert_bond_public_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("bond_public", proving_key)

    def insert_claim_unbond_public_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("claim_unbond_public", proving_key)

    def insert_fee_private_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("fee_private", proving_key)

    def insert_fee_public_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("fee_public", proving_key)

    def insert_inclusion_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("inclusion", proving_key)

    def insert_join_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("join", proving_key)

    def insert_set_validator_state_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("set_validator_state", proving_key)

    def insert_split_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("split", proving_key)

    def insert_transfer_private_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("transfer_private", proving_key)

    def insert_transfer_private_to_public_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("transfer_private_to_public", proving_key)

    def insert_transfer_public_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("transfer_public", proving_key)

    def insert_transfer_public_to_private_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("transfer_public_to_private", proving_key)

    def insert_unbond_delegator_as_validator_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("unbond_delegator_as_validator", proving_key)

    def insert_unbond_public_keys(self, proving_key: Any) -> None:
        self.insert_credits_proving_key("unbond_public", proving_key)

    # ---- Cache management ----------------------------------------------------

    def cache_keys(self, locator: str, keys: FunctionKeyPair) -> None:
        proving_key, verifying_key = keys
        self._cache.set(locator, proving_key.to_bytes(), verifying_key.to_bytes())

    def contains_keys(self, locator: str) -> bool:
        return self._cache.contains(locator)

    def delete_keys(self, locator: str) -> bool:
        return self._cache.delete(locator)

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_keys(self, locator: str) -> FunctionKeyPair:
        entry = self._cache.get(locator)
        if entry is None:
            raise KeyNotFoundError(locator)
        try:
            return FunctionKeyPair(
                self._engine.proving_key_from_bytes(entry.proving_key),
                self._engine.verifying_key_from_bytes(entry.verifying_key),
            )
        except ValueError as e:
            raise KeyIntegrityError(locator, f"cached keys could not be parsed: {e}") from e


__all__ = ["OfflineKeyProvider"]
