"""
aleo_sdk.programs.manager
=========================

High-level transaction orchestration.

``ProgramManager`` gathers everything a transaction needs and hands it to the
engine: the signing key, fee and amount records, function keys, program source
and its imports. Submitting operations then broadcast the result through the
``NetworkClient`` and return the transaction id.

Every mutating operation follows the same steps:

1. private key: the argument, else the configured account;
2. records: explicit records (plaintext strings are parsed up front), else a
   search through the record provider;
3. keys: resolved through the key provider; if that fails the engine
   synthesizes them, so the failure is only logged;
4. program source and its imports, from the ledger when not supplied;
5. build (and for non ``build_*`` operations, submit).

Typical usage
-------------
    manager = ProgramManager(engine, "https://api.explorer.aleo.org/v1")
    manager.set_account(Account(engine, "APrivateKey1..."))
    tx_id = manager.transfer(1.5, "aleo1...", "public", fee=0.3)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..account import resolve_private_key
from ..config import SDKConfig
from ..errors import (
    AleoSdkError,
    InvalidRecordFormatError,
    ProgramAlreadyExistsError,
    ProgramNotFoundError,
    RecordNotFoundError,
)
from ..keys.base import FunctionKeyPair
from ..keys.params import RemoteKeySearch
from ..keys.provider import NetworkKeyProvider
from ..network.client import NetworkClient
from ..types.core import CREDITS_PROGRAM_ID
from .options import ExecutionOptions, credits_to_microcredits, microcredits_literal
from .transfer import TransferType

log = logging.getLogger(__name__)

_NO_KEYS = FunctionKeyPair(None, None)


class ProgramManager:
    """
    Builds, executes and submits program transactions.

    Parameters
    ----------
    engine : ProofEngine
        Cryptographic engine doing the actual proving and encoding.
    host : str | None
        Ledger API base address; defaults to ``config.host``.
    key_provider : FunctionKeyProvider | None
        Defaults to a ``NetworkKeyProvider`` configured from ``config``.
    record_provider : RecordProvider | None
        Needed only when records must be searched for (private fees, private
        transfers without an explicit amount record).
    network_client : NetworkClient | None
        Defaults to a client for ``host``.
    """

    def __init__(
        self,
        engine: Any,
        host: Optional[str] = None,
        key_provider: Any = None,
        record_provider: Any = None,
        *,
        network_client: Optional[NetworkClient] = None,
        account: Any = None,
        config: Optional[SDKConfig] = None,
    ) -> None:
        self.config = config or SDKConfig()
        self.engine = engine
        self.host = host or self.config.host
        self.network_client = network_client or NetworkClient.from_config(
            SDKConfig.with_overrides(self.config, host=self.host), engine=engine
        )
        self.key_provider = key_provider or NetworkKeyProvider.from_config(engine, self.config)
        self.record_provider = record_provider
        self.account = account

    # ---- Configuration -------------------------------------------------------

    def set_account(self, account: Any) -> None:
        self.account = account

    def set_host(self, host: str) -> None:
        self.host = host
        self.network_client.set_host(host)

    def set_key_provider(self, key_provider: Any) -> None:
        self.key_provider = key_provider

    def set_record_provider(self, record_provider: Any) -> None:
        self.record_provider = record_provider

    # ---- Shared steps --------------------------------------------------------

    def _private_key(self, private_key: Any, operation: str) -> Any:
        return resolve_private_key(self.engine, private_key, self.account, operation)

    def _parse_record(self, record: Any) -> Any:
        if not isinstance(record, str):
            return record
        try:
            return self.engine.record_plaintext_from_string(record)
        except ValueError as e:
            raise InvalidRecordFormatError(record, reason=str(e)) from e

    def _try_keys(self, label: str, resolve: Callable[[], FunctionKeyPair]) -> FunctionKeyPair:
        try:
            return FunctionKeyPair(*resolve())
        except AleoSdkError as e:
            log.warning("%s keys not found, the engine will synthesize them: %s", label, e)
            return _NO_KEYS

    def _fee_keys(self, private_fee: bool) -> FunctionKeyPair:
        if private_fee:
            return self._try_keys("fee_private", self.key_provider.fee_private_keys)
        return self._try_keys("fee_public", self.key_provider.fee_public_keys)

    def _fee_record(
        self,
        private_fee: bool,
        fee: float,
        fee_record: Any,
        search: Any,
        nonces: Iterable[str] = (),
    ) -> Any:
        if not private_fee:
            return None
        return self.get_credits_record(fee, nonces, fee_record, search)

    def _program_source(self, program: Any, program_id: str) -> str:
        if program is None:
            return self.network_client.get_program(program_id)
        return program if isinstance(program, str) else str(program)

    def _imports_for(self, source: str, imports: Optional[Mapping[str, str]]) -> Mapping[str, str]:
        if imports is not None:
            return imports
        if not self.create_program_from_source(source).imports:
            return {}
        return self.network_client.get_program_imports(source)

    def get_credits_record(
        self,
        amount: float,
        nonces: Iterable[str] = (),
        record: Any = None,
        search: Any = None,
    ) -> Any:
        """
        A credits record worth more than ``amount`` credits.

        An explicit ``record`` (plaintext object or string) wins; otherwise the
        record provider is searched, skipping ``nonces``.
        """
        if record is not None:
            return self._parse_record(record)
        microcredits = credits_to_microcredits(amount)
        if self.record_provider is None:
            raise RecordNotFoundError(
                "no record provider configured", program=CREDITS_PROGRAM_ID, microcredits=microcredits
            )
        return self.record_provider.find_credits_record(microcredits, True, list(nonces), search)

    # ---- Deployment ----------------------------------------------------------

    def build_deployment_transaction(
        self,
        program: str,
        fee: float,
        private_fee: bool = False,
        record_search_params: Any = None,
        fee_record: Any = None,
        private_key: Any = None,
    ) -> Any:
        program_obj = self.create_program_from_source(program)
        pk = self._private_key(private_key, "deploy")
        if fee_record is not None:
            fee_record = self._parse_record(fee_record)

        try:
            self.network_client.get_program(program_obj.id)
        except ProgramNotFoundError:
            log.info("program %s is not deployed yet, deploying", program_obj.id)
        else:
            raise ProgramAlreadyExistsError(program_obj.id)

        fee_record = self._fee_record(private_fee, fee, fee_record, record_search_params)
        fee_pk, fee_vk = self._fee_keys(private_fee)
        imports = self._imports_for(program, None)
        return self.engine.build_deployment_transaction(
            private_key=pk,
            program=program,
            fee_credits=fee,
            fee_record=fee_record,
            url=self.host,
            imports=imports,
            fee_proving_key=fee_pk,
            fee_verifying_key=fee_vk,
        )

    def deploy(
        self,
        program: str,
        fee: float,
        private_fee: bool = False,
        record_search_params: Any = None,
        fee_record: Any = None,
        private_key: Any = None,
    ) -> str:
        """
        Deploy ``program`` and return the transaction id.

        Raises ProgramAlreadyExistsError if a program with the same id is
        already on the ledger.
        """
        tx = self.build_deployment_transaction(
            program, fee, private_fee, record_search_params, fee_record, private_key
        )
        return self.network_client.submit_transaction(tx)

    # ---- Execution -----------------------------------------------------------

    def build_execution_transaction(
        self, options: Optional[ExecutionOptions] = None, **overrides: Any
    ) -> Any:
        """
        Build an execution transaction for ``options.function_name``.

        Options may be passed as an ``ExecutionOptions`` object, as keyword
        arguments, or both (keywords override the object's fields).
        """
        opts = options.merged(**overrides) if options is not None else ExecutionOptions(**overrides)
        pk = self._private_key(opts.private_key, "build_execution_transaction")
        fee_record = self._parse_record(opts.fee_record) if opts.fee_record is not None else None

        program = self._program_source(opts.program, opts.program_name)
        fee_record = self._fee_record(opts.private_fee, opts.fee, fee_record, opts.record_search_params)
        fee_pk, fee_vk = self._fee_keys(opts.private_fee)

        proving_key, verifying_key = opts.proving_key, opts.verifying_key
        if proving_key is None or verifying_key is None:
            if opts.key_search_params is not None:
                proving_key, verifying_key = self._try_keys(
                    f"{opts.program_name}/{opts.function_name}",
                    lambda: self.key_provider.function_keys(opts.key_search_params),
                )
            else:
                proving_key = verifying_key = None

        imports = self._imports_for(program, opts.imports)
        return self.engine.build_execution_transaction(
            private_key=pk,
            program=program,
            function_name=opts.function_name,
            inputs=list(opts.inputs),
            fee_credits=opts.fee,
            fee_record=fee_record,
            url=self.host,
            imports=imports,
            proving_key=proving_key,
            verifying_key=verifying_key,
            fee_proving_key=fee_pk,
            fee_verifying_key=fee_vk,
            offline_query=opts.offline_query,
        )

    def execute(self, options: Optional[ExecutionOptions] = None, **overrides: Any) -> str:
        tx = self.build_execution_transaction(options, **overrides)
        return self.network_client.submit_transaction(tx)

    def run(
        self,
        program: str,
        function_name: str,
        inputs: Sequence[str],
        prove_execution: bool = False,
        imports: Optional[Mapping[str, str]] = None,
        key_search_params: Any = None,
        proving_key: Any = None,
        verifying_key: Any = None,
        private_key: Any = None,
        offline_query: Any = None,
    ) -> Any:
        """Execute a function locally; nothing is broadcast."""
        pk = self._private_key(private_key, "run")
        if (proving_key is None or verifying_key is None) and key_search_params is not None:
            proving_key, verifying_key = self._try_keys(
                function_name, lambda: self.key_provider.function_keys(key_search_params)
            )
        log.info("running %s offline", function_name)
        return self.engine.execute_function_offline(
            private_key=pk,
            program=program,
            function_name=function_name,
            inputs=list(inputs),
            prove_execution=prove_execution,
            imports=imports,
            proving_key=proving_key,
            verifying_key=verifying_key,
            url=self.host,
            offline_query=offline_query,
        )

    def synthesize_keys(
        self,
        program: str,
        function_name: str,
        inputs: Sequence[str],
        private_key: Any = None,
    ) -> FunctionKeyPair:
        """
        Synthesize the proving/verifying keys of a function. Falls back to a
        throwaway private key when neither a key nor an account is available.
        """
        if private_key is None and self.account is None:
            pk = self.engine.new_private_key()
        else:
            pk = self._private_key(private_key, "synthesize_keys")
        imports = self._imports_for(program, None)
        proving_key, verifying_key = self.engine.synthesize_key_pair(
            private_key=pk,
            program=program,
            function_name=function_name,
            inputs=list(inputs),
            imports=imports,
        )
        return FunctionKeyPair(proving_key, verifying_key)

    # ---- Records -------------------------------------------------------------

    def join(
        self,
        record_one: Any,
        record_two: Any,
        fee: float,
        private_fee: bool = False,
        record_search_params: Any = None,
        fee_record: Any = None,
        private_key: Any = None,
        offline_query: Any = None,
    ) -> str:
        """Merge two credits records into one and return the transaction id."""
        pk = self._private_key(private_key, "join")
        record_one = self._parse_record(record_one)
        record_two = self._parse_record(record_two)
        if fee_record is not None:
            fee_record = self._parse_record(fee_record)

        fee_record = self._fee_record(
            private_fee, fee, fee_record, record_search_params, (record_one.nonce, record_two.nonce)
        )
        fee_pk, fee_vk = self._fee_keys(private_fee)
        join_pk, join_vk = self._try_keys("join", self.key_provider.join_keys)

        tx = self.engine.build_join_transaction(
            private_key=pk,
            record_one=record_one,
            record_two=record_two,
            fee_credits=fee,
            fee_record=fee_record,
            url=self.host,
            join_proving_key=join_pk,
            join_verifying_key=join_vk,
            fee_proving_key=fee_pk,
            fee_verifying_key=fee_vk,
            offline_query=offline_query,
        )
        return self.network_client.submit_transaction(tx)

    def split(
        self,
        split_amount: float,
        amount_record: Any,
        private_key: Any = None,
        offline_query: Any = None,
    ) -> str:
        pk = self._private_key(private_key, "split")
        amount_record = self._parse_record(amount_record)
        split_pk, split_vk = self._try_keys("split", self.key_provider.split_keys)
        tx = self.engine.build_split_transaction(
            private_key=pk,
            split_amount=split_amount,
            amount_record=amount_record,
            url=self.host,
            split_proving_key=split_pk,
            split_verifying_key=split_vk,
            offline_query=offline_query,
        )
        return self.network_client.submit_transaction(tx)

    # ---- Transfers -----------------------------------------------------------

    def build_transfer_transaction(
        self,
        amount: float,
        recipient: str,
        transfer_type: Any,
        fee: float,
        private_fee: bool = False,
        record_search_params: Any = None,
        amount_record: Any = None,
        fee_record: Any = None,
        private_key: Any = None,
        offline_query: Any = None,
    ) -> Any:
        """
        Build a credits transfer of ``amount`` credits to ``recipient``.

        ``transfer_type`` accepts any spelling ``TransferType.parse`` knows.
        Private and private-to-public transfers spend an amount record (given
        or searched for); the fee record search then skips that record.
        """
        kind = TransferType.parse(transfer_type)
        pk = self._private_key(private_key, "transfer")
        if amount_record is not None:
            amount_record = self._parse_record(amount_record)
        if fee_record is not None:
            fee_record = self._parse_record(fee_record)

        fee_pk, fee_vk = self._fee_keys(private_fee)
        transfer_pk, transfer_vk = self._try_keys(
            kind.function_name, lambda: self.key_provider.transfer_keys(kind)
        )

        nonces = []
        if kind.requires_amount_record:
            amount_record = self.get_credits_record(amount, (), amount_record, record_search_params)
            nonces.append(amount_record.nonce)
        else:
            amount_record = None
        fee_record = self._fee_record(private_fee, fee, fee_record, record_search_params, nonces)

        return self.engine.build_transfer_transaction(
            private_key=pk,
            amount_credits=amount,
            recipient=recipient,
            transfer_type=kind.value,
            amount_record=amount_record,
            fee_credits=fee,
            fee_record=fee_record,
            url=self.host,
            transfer_proving_key=transfer_pk,
            transfer_verifying_key=transfer_vk,
            fee_proving_key=fee_pk,
            fee_verifying_key=fee_vk,
            offline_query=offline_query,
        )

    def build_transfer_public_transaction(
        self,
        amount: float,
        recipient: str,
        fee: float,
        private_key: Any = None,
        offline_query: Any = None,
    ) -> Any:
        return self.build_transfer_transaction(
            amount,
            recipient,
            TransferType.PUBLIC,
            fee,
            private_fee=False,
            private_key=private_key,
            offline_query=offline_query,
        )

    def transfer(
        self,
        amount: float,
        recipient: str,
        transfer_type: Any,
        fee: float,
        private_fee: bool = False,
        record_search_params: Any = None,
        amount_record: Any = None,
        fee_record: Any = None,
        private_key: Any = None,
        offline_query: Any = None,
    ) -> str:
        tx = self.build_transfer_transaction(
            amount,
            recipient,
            transfer_type,
            fee,
            private_fee,
            record_search_params,
            amount_record,
            fee_record,
            private_key,
            offline_query,
        )
        return self.network_client.submit_transaction(tx)

    # ---- Staking -------------------------------------------------------------

    def _credits_options(
        self, function_name: str, inputs: Sequence[str], fee: float, overrides: Mapping[str, Any]
    ) -> ExecutionOptions:
        base = ExecutionOptions(
            program_name=CREDITS_PROGRAM_ID,
            function_name=function_name,
            fee=fee,
            private_fee=False,
            inputs=tuple(inputs),
            key_search_params=RemoteKeySearch.for_credits(function_name, key_store=self.config.key_store),
            program=str(self.credits_program()),
        )
        return base.merged(**overrides)

    def build_bond_public_transaction(self, address: str, amount: float, **options: Any) -> Any:
        """Bond ``amount`` credits to the validator at ``address``."""
        opts = self._credits_options(
            "bond_public", [address, microcredits_literal(amount)], self.config.fees.bond_public, options
        )
        return self.build_execution_transaction(opts)

    def bond_public(self, address: str, amount: float, **options: Any) -> str:
        tx = self.build_bond_public_transaction(address, amount, **options)
        return self.network_client.submit_transaction(tx)

    def build_unbond_public_transaction(self, amount: float, **options: Any) -> Any:
        opts = self._credits_options(
            "unbond_public", [microcredits_literal(amount)], self.config.fees.unbond_public, options
        )
        return self.build_execution_transaction(opts)

    def unbond_public(self, amount: float, **options: Any) -> str:
        tx = self.build_unbond_public_transaction(amount, **options)
        return self.network_client.submit_transaction(tx)

    def build_claim_unbond_public_transaction(self, **options: Any) -> Any:
        opts = self._credits_options("claim_unbond_public", [], self.config.fees.claim_unbond_public, options)
        return self.build_execution_transaction(opts)

    def claim_unbond_public(self, **options: Any) -> str:
        tx = self.build_claim_unbond_public_transaction(**options)
        return self.network_client.submit_transaction(tx)

    def build_set_validator_state_transaction(self, validator_state: bool, **options: Any) -> Any:
        opts = self._credits_options(
            "set_validator_state",
            ["true" if validator_state else "false"],
            self.config.fees.set_validator_state,
            options,
        )
        return self.build_execution_transaction(opts)

    def set_validator_state(self, validator_state: bool, **options: Any) -> str:
        tx = self.build_set_validator_state_transaction(validator_state, **options)
        return self.network_client.submit_transaction(tx)

    def build_unbond_delegator_as_validator_transaction(self, address: str, **options: Any) -> Any:
        opts = self._credits_options(
            "unbond_delegator_as_validator",
            [address],
            self.config.fees.unbond_delegator_as_validator,
            options,
        )
        return self.build_execution_transaction(opts)

    def unbond_delegator_as_validator(self, address: str, **options: Any) -> str:
        tx = self.build_unbond_delegator_as_validator_transaction(address, **options)
        return self.network_client.submit_transaction(tx)

    # ---- Programs ------------------------------------------------------------

    def verify_execution(self, response: Any) -> bool:
        try:
            return bool(self.engine.verify_execution(response))
        except ValueError as e:
            log.warning("execution could not be verified: %s", e)
            return False

    def create_program_from_source(self, source: str) -> Any:
        """Parse program source; ValueError if it is not a valid program."""
        return self.engine.program_from_string(source)

    def credits_program(self) -> Any:
        return self.engine.credits_program()

    def verify_program(self, source: str) -> bool:
        try:
            self.create_program_from_source(source)
        except ValueError:
            return False
        return True


__all__ = ["ProgramManager"]
