"""
aleo_sdk.engine
===============

Interfaces for the external cryptographic engine.

Proof construction and verification, record decryption, key derivation and
transaction encoding all happen inside an engine this package does not
implement (typically native bindings). The SDK only talks to it through the
minimal protocols below, so any binding that exposes these methods can be
plugged into `ProgramManager`, `RecordScanner` and the key providers.

Conventions
-----------
- ``from_string`` style constructors raise ``ValueError`` on malformed input.
- ``str(obj)`` yields the canonical string form (records, programs,
  transactions, private keys).
- Key objects serialize with ``to_bytes()``; the identity predicates
  (``is_prover_for`` / ``is_verifier_for``) answer whether a key is the
  protocol-native key for a ``credits.aleo`` function name (or ``"inclusion"``).
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple

__all__ = [
    "Address",
    "ViewKey",
    "PrivateKey",
    "RecordPlaintext",
    "RecordCiphertext",
    "ProvingKey",
    "VerifyingKey",
    "Program",
    "Transaction",
    "ExecutionResponse",
    "ProofEngine",
]


class Address(Protocol):
    def verify(self, message: bytes, signature: Any) -> bool: ...


class ViewKey(Protocol):
    def decrypt(self, ciphertext: str) -> "RecordPlaintext": ...


class PrivateKey(Protocol):
    def view_key(self) -> ViewKey: ...

    def address(self) -> Address: ...

    def sign(self, message: bytes) -> Any: ...


class RecordPlaintext(Protocol):
    @property
    def microcredits(self) -> int: ...

    @property
    def nonce(self) -> str: ...

    def serial_number(self, private_key: PrivateKey, program_id: str, record_name: str) -> str: ...


class RecordCiphertext(Protocol):
    def is_owner(self, view_key: ViewKey) -> bool: ...

    def decrypt(self, view_key: ViewKey) -> RecordPlaintext: ...


class ProvingKey(Protocol):
    def to_bytes(self) -> bytes: ...

    def is_prover_for(self, function_name: str) -> bool: ...


class VerifyingKey(Protocol):
    def to_bytes(self) -> bytes: ...

    def is_verifier_for(self, function_name: str) -> bool: ...


class Program(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def imports(self) -> Sequence[str]: ...


class Transaction(Protocol):
    def __str__(self) -> str: ...


class ExecutionResponse(Protocol):
    """Result of an offline function run."""

    def outputs(self) -> Sequence[str]: ...


class ProofEngine(Protocol):
    """
    Everything the SDK needs from the cryptographic engine.

    Builders receive fully resolved inputs: keys may be ``None``, in which case
    the engine synthesizes them on the fly.
    """

    # --- parsing / primitives ----------------------------------------------
    def private_key_from_string(self, value: str) -> PrivateKey: ...

    def new_private_key(self, seed: Optional[bytes] = None) -> PrivateKey: ...

    def record_ciphertext_from_string(self, value: str) -> RecordCiphertext: ...

    def record_plaintext_from_string(self, value: str) -> RecordPlaintext: ...

    def program_from_string(self, source: str) -> Program: ...

    def credits_program(self) -> Program: ...

    def proving_key_from_bytes(self, data: bytes) -> ProvingKey: ...

    def verifying_key_from_bytes(self, data: bytes) -> VerifyingKey: ...

    def verifying_key_from_string(self, value: str) -> VerifyingKey: ...

    def credits_verifying_key(self, function_name: str) -> VerifyingKey:
        """Compiled-in verifying key for a credits.aleo function (or "inclusion")."""
        ...

    # --- transaction builders ------------------------------------------------
    def build_deployment_transaction(
        self,
        *,
        private_key: PrivateKey,
        program: str,
        fee_credits: float,
        fee_record: Optional[RecordPlaintext],
        url: str,
        imports: Mapping[str, str],
        fee_proving_key: Optional[ProvingKey],
        fee_verifying_key: Optional[VerifyingKey],
    ) -> Transaction: ...

    def build_execution_transaction(
        self,
        *,
        private_key: PrivateKey,
        program: str,
        function_name: str,
        inputs: Sequence[str],
        fee_credits: float,
        fee_record: Optional[RecordPlaintext],
        url: str,
        imports: Mapping[str, str],
        proving_key: Optional[ProvingKey],
        verifying_key: Optional[VerifyingKey],
        fee_proving_key: Optional[ProvingKey],
        fee_verifying_key: Optional[VerifyingKey],
        offline_query: Optional[Any] = None,
    ) -> Transaction: ...

    def build_join_transaction(
        self,
        *,
        private_key: PrivateKey,
        record_one: RecordPlaintext,
        record_two: RecordPlaintext,
        fee_credits: float,
        fee_record: Optional[RecordPlaintext],
        url: str,
        join_proving_key: Optional[ProvingKey],
        join_verifying_key: Optional[VerifyingKey],
        fee_proving_key: Optional[ProvingKey],
        fee_verifying_key: Optional[VerifyingKey],
        offline_query: Optional[Any] = None,
    ) -> Transaction: ...

    def build_split_transaction(
        self,
        *,
        private_key: PrivateKey,
        split_amount: float,
        amount_record: RecordPlaintext,
        url: str,
        split_proving_key: Optional[ProvingKey],
        split_verifying_key: Optional[VerifyingKey],
        offline_query: Optional[Any] = None,
    ) -> Transaction: ...

    def build_transfer_transaction(
        self,
        *,
        private_key: PrivateKey,
        amount_credits: float,
        recipient: str,
        transfer_type: str,
        amount_record: Optional[RecordPlaintext],
        fee_credits: float,
        fee_record: Optional[RecordPlaintext],
        url: str,
        transfer_proving_key: Optional[ProvingKey],
        transfer_verifying_key: Optional[VerifyingKey],
        fee_proving_key: Optional[ProvingKey],
        fee_verifying_key: Optional[VerifyingKey],
        offline_query: Optional[Any] = None,
    ) -> Transaction: ...

    def execute_function_offline(
        self,
        *,
        private_key: PrivateKey,
        program: str,
        function_name: str,
        inputs: Sequence[str],
        prove_execution: bool,
        imports: Optional[Mapping[str, str]],
        proving_key: Optional[ProvingKey],
        verifying_key: Optional[VerifyingKey],
        url: str,
        offline_query: Optional[Any] = None,
    ) -> ExecutionResponse: ...

    def synthesize_key_pair(
        self,
        *,
        private_key: PrivateKey,
        program: str,
        function_name: str,
        inputs: Sequence[str],
        imports: Mapping[str, str],
    ) -> Tuple[ProvingKey, VerifyingKey]: ...

    def verify_execution(self, response: ExecutionResponse) -> bool: ...
