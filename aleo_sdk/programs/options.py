"""
Execution options and unit helpers shared by the ``ProgramManager`` operations.

Convenience operations (staking, transfers) start from their own defaults and
let the caller override any field:

    opts = ExecutionOptions(program_name="credits.aleo", function_name="bond_public", fee=0.86)
    opts = opts.merged(fee=1.0, private_fee=True)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Sequence, Tuple

MICROCREDITS_PER_CREDIT = 1_000_000


def credits_to_microcredits(amount: float) -> int:
    """Whole microcredits in ``amount`` credits (fractional microcredits are truncated)."""
    return math.trunc(float(amount) * MICROCREDITS_PER_CREDIT)


def microcredits_literal(amount: float) -> str:
    """``amount`` credits as a program ``u64`` literal, e.g. 1.5 -> "1500000u64"."""
    return f"{credits_to_microcredits(amount)}u64"


@dataclass(frozen=True, slots=True)
class ExecutionOptions:
    program_name: str
    function_name: str
    fee: float = 0.0
    private_fee: bool = False
    inputs: Tuple[str, ...] = ()
    key_search_params: Optional[Any] = None
    program: Optional[str] = None
    imports: Optional[Mapping[str, str]] = None
    proving_key: Optional[Any] = None
    verifying_key: Optional[Any] = None
    fee_record: Optional[Any] = None
    record_search_params: Optional[Any] = None
    private_key: Optional[Any] = None
    offline_query: Optional[Any] = None

    def __post_init__(self) -> None:
        if not isinstance(self.inputs, tuple):
            object.__setattr__(self, "inputs", tuple(self.inputs or ()))

    def merged(self, **overrides: Any) -> "ExecutionOptions":
        """
        Copy with ``overrides`` applied field by field. Every given name is
        applied, so ``key_search_params=None`` clears a default; unknown names
        raise TypeError.
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"unknown execution options: {sorted(unknown)}")
        return replace(self, **overrides)

    @property
    def fee_microcredits(self) -> int:
        return credits_to_microcredits(self.fee)

    def with_inputs(self, inputs: Sequence[str]) -> "ExecutionOptions":
        return replace(self, inputs=tuple(inputs))


__all__ = [
    "MICROCREDITS_PER_CREDIT",
    "credits_to_microcredits",
    "microcredits_literal",
    "ExecutionOptions",
]
