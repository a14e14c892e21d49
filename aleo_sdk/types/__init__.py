"""
aleo_sdk.types
==============

Ledger datatypes returned by the gateway (blocks, confirmed transactions,
transitions and their inputs/outputs).

    from aleo_sdk.types import Block
    block = Block.from_json(payload)
"""

from __future__ import annotations

from .core import (  # noqa: F401
    CREDITS_PROGRAM_ID,
    CREDITS_RECORD_NAME,
    Block,
    ConfirmedTransaction,
    Transaction,
    Transition,
    TransitionInput,
    TransitionOutput,
    blocks_from_json,
)

__all__ = [
    "CREDITS_PROGRAM_ID",
    "CREDITS_RECORD_NAME",
    "Block",
    "ConfirmedTransaction",
    "Transaction",
    "Transition",
    "TransitionInput",
    "TransitionOutput",
    "blocks_from_json",
]
