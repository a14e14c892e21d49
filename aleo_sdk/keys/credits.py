"""
Protocol-native key table for ``credits.aleo``.

Each built-in function has a cache locator, the URL of its proving key in the
public parameter store, and the name of the verifying key compiled into the
engine (resolved with ``ProofEngine.credits_verifying_key``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

KEY_STORE = "https://testnet3.parameters.aleo.org/"

INCLUSION_LOCATOR = "inclusion"


@dataclass(frozen=True, slots=True)
class CreditsKey:
    name: str
    locator: str
    prover: str
    verifier: str

    @property
    def prover_file(self) -> str:
        return self.prover.rsplit("/", 1)[-1]


def _credits_key(name: str, prover_suffix: str, verifier_suffix: str, locator: Optional[str] = None) -> CreditsKey:
    return CreditsKey(
        name=name,
        locator=locator or f"credits.aleo/{name}",
        prover=f"{KEY_STORE}{name}.prover.{prover_suffix}",
        verifier=f"{name}.verifier.{verifier_suffix}",
    )


CREDITS_PROGRAM_KEYS: Dict[str, CreditsKey] = {
    k.name: k
    for k in (
        _credits_key("bond_public", "9c3547d", "10315ae"),
        _credits_key("claim_unbond_public", "f8b64aa", "8fd7445"),
        _credits_key("fee_private", "43fab98", "f3dfefc"),
        _credits_key("fee_public", "634f153", "09eeb4f"),
        _credits_key("inclusion", "cd85cc5", "e6f3add", locator=INCLUSION_LOCATOR),
        _credits_key("join", "1a76fe8", "4f1701b"),
        _credits_key("set_validator_state", "5ce19be", "730d95b"),
        _credits_key("split", "e6d12b9", "2f9733d"),
        _credits_key("transfer_private", "2b487c0", "3a3cbba"),
        _credits_key("transfer_private_to_public", "1ff64cb", "d5b60de"),
        _credits_key("transfer_public", "a74565e", "a4c2906"),
        _credits_key("transfer_public_to_private", "1bcddf9", "b094554"),
        _credits_key("unbond_delegator_as_validator", "115a86b", "9585609"),
        _credits_key("unbond_public", "9547c05", "09873cd"),
    )
}

_BY_LOCATOR: Dict[str, CreditsKey] = {k.locator: k for k in CREDITS_PROGRAM_KEYS.values()}
_BY_VERIFIER: Dict[str, CreditsKey] = {k.verifier: k for k in CREDITS_PROGRAM_KEYS.values()}


def credits_key(name: str) -> CreditsKey:
    """Table entry for a credits.aleo function name; KeyError if unknown."""
    return CREDITS_PROGRAM_KEYS[name]


def by_locator(locator: str) -> Optional[CreditsKey]:
    return _BY_LOCATOR.get(locator)


def by_verifier(verifier: str) -> Optional[CreditsKey]:
    """Entry whose compiled-in verifier name matches ``verifier``, if any."""
    return _BY_VERIFIER.get(verifier)


__all__ = [
    "KEY_STORE",
    "INCLUSION_LOCATOR",
    "CreditsKey",
    "CREDITS_PROGRAM_KEYS",
    "credits_key",
    "by_locator",
    "by_verifier",
]
