"""
Account: a private key with its derived view key and address.

Key material is produced and held by the engine; this wrapper only caches the
derived objects and offers the record helpers the SDK needs.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Union

from .errors import MissingPrivateKeyError

log = logging.getLogger(__name__)


class Account:
    def __init__(
        self,
        engine: Any,
        private_key: Union[str, Any, None] = None,
        *,
        seed: Optional[bytes] = None,
    ) -> None:
        self._engine = engine
        if private_key is None:
            self._private_key = engine.new_private_key(seed)
        elif isinstance(private_key, str):
            self._private_key = engine.private_key_from_string(private_key)
        else:
            self._private_key = private_key
        self._view_key = self._private_key.view_key()
        self._address = self._private_key.address()

    @classmethod
    def from_private_key_string(cls, engine: Any, private_key: str) -> "Account":
        return cls(engine, private_key)

    @property
    def private_key(self) -> Any:
        return self._private_key

    @property
    def view_key(self) -> Any:
        return self._view_key

    @property
    def address(self) -> Any:
        return self._address

    def decrypt_record(self, ciphertext: str) -> Any:
        return self._view_key.decrypt(ciphertext)

    def decrypt_records(self, ciphertexts: Iterable[str]) -> List[Any]:
        return [self.decrypt_record(c) for c in ciphertexts]

    def owns_record_ciphertext(self, ciphertext: Union[str, Any]) -> bool:
        """True if this account's view key owns ``ciphertext``; malformed input is not owned."""
        if isinstance(ciphertext, str):
            try:
                ciphertext = self._engine.record_ciphertext_from_string(ciphertext)
            except ValueError as e:
                log.debug("not a record ciphertext: %s", e)
                return False
        return bool(ciphertext.is_owner(self._view_key))

    def sign(self, message: bytes) -> Any:
        return self._private_key.sign(message)

    def verify(self, message: bytes, signature: Any) -> bool:
        return bool(self._address.verify(message, signature))

    def __str__(self) -> str:
        return str(self._address)

    def __repr__(self) -> str:
        return f"Account(address={self._address!s})"


def resolve_private_key(engine: Any, private_key: Any, account: Optional[Account], operation: str) -> Any:
    """
    Pick the key for ``operation``: the explicit one (parsed if a string),
    else the configured account's, else MissingPrivateKeyError.
    """
    if private_key is None:
        if account is None:
            raise MissingPrivateKeyError(operation)
        return account.private_key
    if isinstance(private_key, str):
        return engine.private_key_from_string(private_key)
    return private_key


__all__ = ["Account", "resolve_private_key"]
