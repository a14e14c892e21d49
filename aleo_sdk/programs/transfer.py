"""
Transfer kinds and the spellings accepted for them.

``TransferType.parse`` is case and separator insensitive, so "privateToPublic",
"private_to_public", "transfer_private_to_public" and "TransferPrivateToPublic"
all name the same kind.
"""

from __future__ import annotations

import enum
from typing import Union

from ..errors import InvalidTransferTypeError


class TransferType(enum.Enum):
    PRIVATE = "private"
    PRIVATE_TO_PUBLIC = "privateToPublic"
    PUBLIC = "public"
    PUBLIC_TO_PRIVATE = "publicToPrivate"

    @property
    def function_name(self) -> str:
        """credits.aleo function implementing this kind of transfer."""
        return _FUNCTIONS[self]

    @property
    def requires_amount_record(self) -> bool:
        """Private-balance transfers spend a record for the amount."""
        return self in (TransferType.PRIVATE, TransferType.PRIVATE_TO_PUBLIC)

    @classmethod
    def parse(cls, value: Union[str, "TransferType"]) -> "TransferType":
        if isinstance(value, TransferType):
            return value
        norm = _normalize(str(value))
        kind = _ALIASES.get(norm)
        if kind is None:
            raise InvalidTransferTypeError(str(value))
        return kind


def _normalize(value: str) -> str:
    norm = value.strip().lower().replace("_", "").replace("-", "")
    if norm.startswith("transfer") and norm != "transfer":
        norm = norm[len("transfer"):]
    return norm


_FUNCTIONS = {
    TransferType.PRIVATE: "transfer_private",
    TransferType.PRIVATE_TO_PUBLIC: "transfer_private_to_public",
    TransferType.PUBLIC: "transfer_public",
    TransferType.PUBLIC_TO_PRIVATE: "transfer_public_to_private",
}

_ALIASES = {
    "private": TransferType.PRIVATE,
    "privatetopublic": TransferType.PRIVATE_TO_PUBLIC,
    "public": TransferType.PUBLIC,
    "publictoprivate": TransferType.PUBLIC_TO_PRIVATE,
}


__all__ = ["TransferType"]
