"""
aleo_sdk.keys.provider
======================

Online function-key resolution.

Proving keys are fetched over HTTP from a parameter store; verifying keys of
the built-in ``credits.aleo`` functions come from the engine's compiled-in
table, other verifying keys are fetched and parsed (text first, then bytes).
With caching enabled, every resolved pair is stored in a ``KeyCache`` under
its locator and served from there on later requests.

Typical usage
-------------
    provider = NetworkKeyProvider(engine)
    pk, vk = provider.join_keys()
    pk, vk = provider.function_keys(
        RemoteKeySearch(prover_uri="https://.../my.prover", verifier_uri="https://.../my.verifier",
                        cache_key="my_program.aleo/my_function")
    )
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..config import SDKConfig
from ..errors import (
    AleoSdkError,
    InvalidVerifyingKeyError,
    KeyIntegrityError,
    KeyNotFoundError,
    NetworkError,
)
from .base import CreditsKeysMixin, FunctionKeyPair, KeyResolution, resolve
from .cache import KeyCache
from .credits import KEY_STORE, by_verifier
from .params import CachedKeySearch, KeySearchParams, RemoteKeySearch

log = logging.getLogger(__name__)


class NetworkKeyProvider(CreditsKeysMixin):
    """
    Key provider that fetches keys from remote URIs, backed by a ``KeyCache``.

    Parameters
    ----------
    engine : ProofEngine
        Parses key bytes and provides the compiled-in credits verifying keys.
    cache : KeyCache | None
        Cache to use; a private one is created when omitted.
    use_cache : bool
        Store fetched keys and serve repeated requests from the cache.
    key_store : str
        Base URL the built-in credits proving keys are fetched from.
    """

    def __init__(
        self,
        engine: Any,
        *,
        cache: Optional[KeyCache] = None,
        use_cache: bool = True,
        key_store: str = KEY_STORE,
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._engine = engine
        self._cache = cache if cache is not None else KeyCache()
        self._use_cache = bool(use_cache)
        self._key_store = key_store if key_store.endswith("/") else key_store + "/"
        self._timeout = float(timeout_s)
        self._http = session or requests.Session()
        self._strategies = (self._resolve_remote, self._resolve_cached)

    @classmethod
    def from_config(cls, engine: Any, config: SDKConfig, **kwargs: Any) -> "NetworkKeyProvider":
        kwargs.setdefault("use_cache", config.use_key_cache)
        kwargs.setdefault("key_store", config.key_store)
        kwargs.setdefault("timeout_s", config.request_timeout)
        provider = cls(engine, **kwargs)
        provider._http.headers.update(config.http_headers())
        return provider

    @property
    def cache(self) -> KeyCache:
        return self._cache

    # ---- Resolution ----------------------------------------------------------

    def function_keys(self, params: KeySearchParams) -> FunctionKeyPair:
        """
        Resolve a proving/verifying key pair.

        RemoteKeySearch: cache (if enabled) then fetch. CachedKeySearch: cache
        only, KeyNotFoundError when absent. Anything else raises
        InvalidSearchParamsError.
        """
        return resolve(self._strategies, params)

    def fetch_keys(
        self, prover_url: str, verifier_url: str, cache_key: Optional[str] = None
    ) -> FunctionKeyPair:
        return self.function_keys(
            RemoteKeySearch(prover_uri=prover_url, verifier_uri=verifier_url, cache_key=cache_key)
        )

    def credits_keys(self, name: str) -> FunctionKeyPair:
        return self.function_keys(RemoteKeySearch.for_credits(name, key_store=self._key_store))

    def _resolve_remote(self, params: KeySearchParams) -> Optional[KeyResolution]:
        if not isinstance(params, RemoteKeySearch):
            return None
        locator = params.locator
        try:
            if self._use_cache:
                cached = self._pair_from_cache(locator)
                if cached is not None:
                    log.debug("key cache hit for %s", locator)
                    return KeyResolution.ok(cached)
            log.info("fetching keys for %s from %s", locator, params.prover_uri)
            proving_bytes = self.fetch_bytes(params.prover_uri, locator=locator)
            proving_key = self._parse_proving_key(locator, proving_bytes)
            verifying_key = self.get_verifying_key(params.verifier_uri)
        except AleoSdkError as e:
            return KeyResolution.fail(e)
        if self._use_cache:
            self._cache.set(locator, proving_bytes, verifying_key.to_bytes())
        return KeyResolution.ok(FunctionKeyPair(proving_key, verifying_key))

    def _resolve_cached(self, params: KeySearchParams) -> Optional[KeyResolution]:
        if not isinstance(params, CachedKeySearch):
            return None
        try:
            pair = self._pair_from_cache(params.cache_key)
        except AleoSdkError as e:
            return KeyResolution.fail(e)
        if pair is None:
            return KeyResolution.fail(KeyNotFoundError(params.cache_key))
        return KeyResolution.ok(pair)

    def _pair_from_cache(self, locator: str) -> Optional[FunctionKeyPair]:
        entry = self._cache.get(locator)
        if entry is None:
            return None
        try:
            return FunctionKeyPair(
                self._engine.proving_key_from_bytes(entry.proving_key),
                self._engine.verifying_key_from_bytes(entry.verifying_key),
            )
        except ValueError as e:
            raise KeyIntegrityError(locator, f"cached keys could not be parsed: {e}") from e

    def _parse_proving_key(self, locator: str, data: bytes) -> Any:
        try:
            return self._engine.proving_key_from_bytes(data)
        except ValueError as e:
            raise KeyIntegrityError(locator, f"proving key could not be parsed: {e}") from e

    # ---- Fetching ------------------------------------------------------------

    def _get(self, url: str, locator: Optional[str]) -> requests.Response:
        op = f"fetch_keys:{locator}" if locator else "fetch_keys"
        try:
            resp = self._http.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise NetworkError(f"GET failed: {e}", operation=op, url=url) from e
        if resp.status_code // 100 != 2:
            raise NetworkError(
                f"unexpected response: {(resp.text or '')[:256]}",
                operation=op,
                url=url,
                status=resp.status_code,
            )
        return resp

    def fetch_bytes(self, url: str, *, locator: Optional[str] = None) -> bytes:
        return self._get(url, locator).content

    def get_verifying_key(self, verifier_uri: str) -> Any:
        """
        Verifying key for ``verifier_uri``.

        Built-in credits verifier names resolve from the engine without any
        network call. Other URIs are fetched and parsed as text, then as raw
        bytes; if neither parses, InvalidVerifyingKeyError is raised.
        """
        builtin = by_verifier(verifier_uri)
        if builtin is not None:
            return self._engine.credits_verifying_key(builtin.name)

        resp = self._get(verifier_uri, None)
        try:
            return self._engine.verifying_key_from_string(resp.text)
        except ValueError:
            log.debug("verifying key at %s is not in text form, trying bytes", verifier_uri)
        try:
            return self._engine.verifying_key_from_bytes(resp.content)
        except ValueError as e:
            raise InvalidVerifyingKeyError(verifier_uri, reason=str(e)) from e

    # ---- Cache management ----------------------------------------------------

    def use_cache(self, enabled: bool) -> None:
        self._use_cache = bool(enabled)

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_keys(self, locator: str, keys: FunctionKeyPair) -> None:
        proving_key, verifying_key = keys
        self._cache.set(locator, proving_key.to_bytes(), verifying_key.to_bytes())

    def contains_keys(self, locator: str) -> bool:
        return self._cache.contains(locator)

    def delete_keys(self, locator: str) -> bool:
        return self._cache.delete(locator)

    def get_keys(self, locator: str) -> FunctionKeyPair:
        pair = self._pair_from_cache(locator)
        if pair is None:
            raise KeyNotFoundError(locator)
        return pair


__all__ = ["NetworkKeyProvider"]
