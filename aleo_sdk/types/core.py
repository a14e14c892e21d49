from __future__ import annotations

"""
Ledger data models for the Python SDK.

This module provides two complementary representations for the objects the
gateway returns:
- Lightweight `TypedDict` shapes mirroring the REST JSON payloads.
- Ergonomic `@dataclass` models with `from_json()` converters.

Record values stay in their on-ledger string form (``record1...``); decrypting
them is the engine's job. Nothing here performs network I/O.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, TypedDict

# --- Common aliases ----------------------------------------------------------

Address = str  # bech32m aleo1...
Field = str  # "<decimal>field"
TransactionId = str  # at1...
TransitionId = str  # au1...
ProgramId = str  # name.aleo

CREDITS_PROGRAM_ID: ProgramId = "credits.aleo"
CREDITS_RECORD_NAME = "credits"


# --- JSON TypedDict shapes ---------------------------------------------------


class InputDict(TypedDict, total=False):
    type: str
    id: Field
    value: str
    tag: Field


class OutputDict(TypedDict, total=False):
    type: str  # "record" | "public" | "private" | "constant" | "external_record" | "future"
    id: Field
    value: str
    checksum: Field


class TransitionDict(TypedDict, total=False):
    id: TransitionId
    program: ProgramId
    function: str
    inputs: List[InputDict]
    outputs: List[OutputDict]
    tpk: str
    tcm: Field


class ExecutionDict(TypedDict, total=False):
    transitions: List[TransitionDict]
    global_state_root: str
    proof: str


class TransactionDict(TypedDict, total=False):
    type: str  # "execute" | "deploy" | "fee"
    id: TransactionId
    execution: ExecutionDict
    fee: Dict[str, Any]


class ConfirmedTransactionDict(TypedDict, total=False):
    status: str  # "accepted" | "rejected"
    type: str  # "execute" | "deploy"
    index: int
    transaction: TransactionDict


class BlockDict(TypedDict, total=False):
    block_hash: str
    previous_hash: str
    header: Dict[str, Any]
    transactions: List[ConfirmedTransactionDict]


# --- Dataclasses -------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class TransitionInput:
    type: str
    id: Optional[Field] = None
    value: Optional[str] = None
    tag: Optional[Field] = None

    @staticmethod
    def from_json(d: Mapping[str, Any]) -> "TransitionInput":
        return TransitionInput(
            type=str(d.get("type", "")),
            id=d.get("id"),
            value=d.get("value"),
            tag=d.get("tag"),
        )


@dataclass(slots=True, frozen=True)
class TransitionOutput:
    type: str
    id: Optional[Field] = None
    value: Optional[str] = None
    checksum: Optional[Field] = None

    @property
    def is_record(self) -> bool:
        return self.type == "record"

    @staticmethod
    def from_json(d: Mapping[str, Any]) -> "TransitionOutput":
        return TransitionOutput(
            type=str(d.get("type", "")),
            id=d.get("id"),
            value=d.get("value"),
            checksum=d.get("checksum"),
        )


@dataclass(slots=True, frozen=True)
class Transition:
    id: TransitionId
    program: ProgramId
    function: str
    inputs: Tuple[TransitionInput, ...] = ()
    outputs: Tuple[TransitionOutput, ...] = ()
    tpk: Optional[str] = None
    tcm: Optional[Field] = None

    def record_outputs(self) -> List[TransitionOutput]:
        return [o for o in self.outputs if o.is_record and o.value]

    @staticmethod
    def from_json(d: Mapping[str, Any]) -> "Transition":
        return Transition(
            id=str(d.get("id", "")),
            program=str(d.get("program", "")),
            function=str(d.get("function", "")),
            inputs=tuple(TransitionInput.from_json(i) for i in d.get("inputs") or ()),
            outputs=tuple(TransitionOutput.from_json(o) for o in d.get("outputs") or ()),
            tpk=d.get("tpk"),
            tcm=d.get("tcm"),
        )


@dataclass(slots=True, frozen=True)
class Transaction:
    type: str
    id: TransactionId
    transitions: Tuple[Transition, ...] = ()
    fee: Optional[Dict[str, Any]] = None

    @staticmethod
    def from_json(d: Mapping[str, Any]) -> "Transaction":
        execution = d.get("execution") or {}
        return Transaction(
            type=str(d.get("type", "")),
            id=str(d.get("id", "")),
            transitions=tuple(
                Transition.from_json(t) for t in execution.get("transitions") or ()
            ),
            fee=d.get("fee"),
        )


@dataclass(slots=True, frozen=True)
class ConfirmedTransaction:
    type: str
    status: Optional[str] = None
    index: Optional[int] = None
    transaction: Optional[Transaction] = None

    @property
    def is_execute(self) -> bool:
        return self.type == "execute"

    @staticmethod
    def from_json(d: Mapping[str, Any]) -> "ConfirmedTransaction":
        tx = d.get("transaction")
        return ConfirmedTransaction(
            type=str(d.get("type", "")),
            status=d.get("status"),
            index=d.get("index"),
            transaction=Transaction.from_json(tx) if isinstance(tx, Mapping) else None,
        )


@dataclass(slots=True, frozen=True)
class Block:
    block_hash: Optional[str] = None
    previous_hash: Optional[str] = None
    height: Optional[int] = None
    transactions: Tuple[ConfirmedTransaction, ...] = field(default_factory=tuple)

    def execute_transitions(self, program_id: Optional[ProgramId] = None) -> List[Transition]:
        """Transitions of confirmed execute transactions, optionally filtered by program."""
        found: List[Transition] = []
        for confirmed in self.transactions:
            if not confirmed.is_execute or confirmed.transaction is None:
                continue
            for transition in confirmed.transaction.transitions:
                if program_id is None or transition.program == program_id:
                    found.append(transition)
        return found

    @staticmethod
    def from_json(d: Mapping[str, Any]) -> "Block":
        header = d.get("header") or {}
        metadata = header.get("metadata") or {}
        height = metadata.get("height")
        return Block(
            block_hash=d.get("block_hash"),
            previous_hash=d.get("previous_hash"),
            height=int(height) if height is not None else None,
            transactions=tuple(
                ConfirmedTransaction.from_json(t)
                for t in d.get("transactions") or ()
                if isinstance(t, Mapping)
            ),
        )


def blocks_from_json(payload: Sequence[Mapping[str, Any]]) -> List[Block]:
    return [Block.from_json(b) for b in payload if isinstance(b, Mapping)]


__all__ = [
    "Address",
    "Field",
    "TransactionId",
    "TransitionId",
    "ProgramId",
    "CREDITS_PROGRAM_ID",
    "CREDITS_RECORD_NAME",
    "InputDict",
    "OutputDict",
    "TransitionDict",
    "ExecutionDict",
    "TransactionDict",
    "ConfirmedTransactionDict",
    "BlockDict",
    "TransitionInput",
    "TransitionOutput",
    "Transition",
    "Transaction",
    "ConfirmedTransaction",
    "Block",
    "blocks_from_json",
]
