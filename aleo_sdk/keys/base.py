"""
Shared pieces of the key providers.

Resolution is a fixed, ordered tuple of strategies. Each strategy looks at the
search parameters and either declines (returns ``None``) or produces a
``KeyResolution`` holding keys or an error. The first strategy that does not
decline decides the outcome; if all decline the parameters were invalid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional, Protocol, Sequence, Union

from ..errors import AleoSdkError, InvalidSearchParamsError
from .params import KeySearchParams

log = logging.getLogger(__name__)


class FunctionKeyPair(NamedTuple):
    proving_key: Any
    verifying_key: Any


@dataclass(frozen=True, slots=True)
class KeyResolution:
    keys: Optional[FunctionKeyPair] = None
    error: Optional[AleoSdkError] = None

    @classmethod
    def ok(cls, keys: FunctionKeyPair) -> "KeyResolution":
        return cls(keys=keys)

    @classmethod
    def fail(cls, error: AleoSdkError) -> "KeyResolution":
        return cls(error=error)

    def unwrap(self) -> FunctionKeyPair:
        if self.error is not None:
            raise self.error
        assert self.keys is not None
        return self.keys


Strategy = Callable[[KeySearchParams], Optional[KeyResolution]]


def resolve(strategies: Sequence[Strategy], params: Any) -> FunctionKeyPair:
    for strategy in strategies:
        result = strategy(params)
        if result is not None:
            return result.unwrap()
    raise InvalidSearchParamsError(repr(params))


class FunctionKeyProvider(Protocol):
    """What ``ProgramManager`` needs from a key provider."""

    def function_keys(self, params: KeySearchParams) -> FunctionKeyPair: ...

    def fee_private_keys(self) -> FunctionKeyPair: ...

    def fee_public_keys(self) -> FunctionKeyPair: ...

    def join_keys(self) -> FunctionKeyPair: ...

    def split_keys(self) -> FunctionKeyPair: ...

    def transfer_keys(self, transfer_type: Any) -> FunctionKeyPair: ...

    def bond_public_keys(self) -> FunctionKeyPair: ...

    def unbond_public_keys(self) -> FunctionKeyPair: ...

    def claim_unbond_public_keys(self) -> FunctionKeyPair: ...

    def set_validator_state_keys(self) -> FunctionKeyPair: ...

    def unbond_delegator_as_validator_keys(self) -> FunctionKeyPair: ...


class CreditsKeysMixin:
    """
    Named helpers for the built-in ``credits.aleo`` functions.

    Subclasses implement ``credits_keys(name)``; everything else routes
    through it.
    """

    def credits_keys(self, name: str) -> FunctionKeyPair:
        raise NotImplementedError

    def fee_private_keys(self) -> FunctionKeyPair:
        return self.credits_keys("fee_private")

    def fee_public_keys(self) -> FunctionKeyPair:
        return self.credits_keys("fee_public")

    def join_keys(self) -> FunctionKeyPair:
        return self.credits_keys("join")

    def split_keys(self) -> FunctionKeyPair:
        return self.credits_keys("split")

    def inclusion_keys(self) -> FunctionKeyPair:
        return self.credits_keys("inclusion")

    def transfer_keys(self, transfer_type: Union[str, Any]) -> FunctionKeyPair:
        from ..programs.transfer import TransferType

        return self.credits_keys(TransferType.parse(transfer_type).function_name)

    def bond_public_keys(self) -> FunctionKeyPair:
        return self.credits_keys("bond_public")

    def unbond_public_keys(self) -> FunctionKeyPair:
        return self.credits_keys("unbond_public")

    def claim_unbond_public_keys(self) -> FunctionKeyPair:
        return self.credits_keys("claim_unbond_public")

    def set_validator_state_keys(self) -> FunctionKeyPair:
        return self.credits_keys("set_validator_state")

    def unbond_delegator_as_validator_keys(self) -> FunctionKeyPair:
        return self.credits_keys("unbond_delegator_as_validator")


__all__ = [
    "FunctionKeyPair",
    "KeyResolution",
    "Strategy",
    "resolve",
    "FunctionKeyProvider",
    "CreditsKeysMixin",
]
