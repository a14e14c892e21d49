"""
aleo_sdk.network.client
=======================

REST client for the publicly exposed endpoints of an Aleo node / explorer API.

All read endpoints are plain GETs under ``{host}/{network}`` returning JSON:

- /latest/height, /latest/block, /latest/stateRoot, /committee/latest
- /block/{height}, /blocks?start=&end=, /block/{height}/transactions
- /program/{id}, /program/{id}/mappings, /program/{id}/mapping/{name}/{key}
- /transaction/{id}, /memoryPool/transactions
- /find/transitionID/{id}, /find/transactionID/deployment/{id}

plus one POST, /transaction/broadcast, which accepts a serialized transaction
and answers with its id.

Typical usage
-------------
    from aleo_sdk.network.client import NetworkClient

    client = NetworkClient("https://api.explorer.aleo.org/v1")
    height = client.get_latest_height()
    blocks = client.get_block_range(height - 10, height)

Design notes
------------
* No retries at this layer; every failure surfaces as ``NetworkError`` carrying
  the operation name, URL and HTTP status.
* ``spent_status`` turns the transition-id lookup into an explicit three-state
  answer so a transport failure is never mistaken for "not spent".
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import quote

import requests

from ..config import SDKConfig
from ..errors import NetworkError, ProgramNotFoundError, TransitionNotFoundError
from ..types.core import Block, blocks_from_json

log = logging.getLogger(__name__)

JsonDict = Dict[str, Any]

DEFAULT_NETWORK = "testnet3"

# Body the gateway sends (with a 5xx status) for an id it has never seen.
_UNKNOWN_ID_PREFIX = "missing transition for id"


class SpentStatus(enum.Enum):
    """Answer of the spent oracle for one serial number."""

    SPENT = "spent"
    UNSPENT = "unspent"
    LOOKUP_FAILED = "lookup_failed"


def _looks_not_found(resp: requests.Response) -> bool:
    if resp.status_code == 404:
        return True
    if resp.status_code < 500:
        return False
    text = (resp.text or "").strip().strip("\"").lower()
    return text.startswith(_UNKNOWN_ID_PREFIX)


class NetworkClient:
    """
    Client for the ledger REST API.

    Parameters
    ----------
    host : str
        Base address of the API (e.g. "https://api.explorer.aleo.org/v1"). The
        network segment is appended internally.
    network : str
        Network path segment, "testnet3" by default.
    timeout_s : float
        Timeout for each HTTP request.
    session : requests.Session | None
        Optional custom session. If not provided, a new session is created.
    engine : ProofEngine | None
        Needed only by the helpers that parse program source
        (``get_program_object``, ``get_program_imports``, ...).
    """

    def __init__(
        self,
        host: str,
        *,
        network: str = DEFAULT_NETWORK,
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
        headers: Optional[Mapping[str, str]] = None,
        engine: Any = None,
        account: Any = None,
    ) -> None:
        self._network = network
        self._base_url = self._join_host(host, network)
        self._timeout = float(timeout_s)
        self._http = session or requests.Session()
        if headers:
            self._http.headers.update(dict(headers))
        self.engine = engine
        self.account = account

    @classmethod
    def from_config(cls, config: SDKConfig, **kwargs: Any) -> "NetworkClient":
        kwargs.setdefault("headers", config.http_headers())
        return cls(
            config.host,
            network=config.network,
            timeout_s=config.request_timeout,
            **kwargs,
        )

    # ---- Helpers -------------------------------------------------------------

    @staticmethod
    def _join_host(host: str, network: str) -> str:
        return f"{host.rstrip('/')}/{network}"

    @property
    def host(self) -> str:
        return self._base_url

    def set_host(self, host: str) -> None:
        self._base_url = self._join_host(host, self._network)

    def set_account(self, account: Any) -> None:
        self.account = account

    def _abs(self, path: str) -> str:
        return self._base_url + path

    def _require_engine(self, operation: str) -> Any:
        if self.engine is None:
            raise RuntimeError(f"NetworkClient.{operation} requires a ProofEngine")
        return self.engine

    def _fetch(
        self,
        operation: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        url = self._abs(path)
        try:
            resp = self._http.get(
                url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"GET failed: {e}", operation=operation, url=url) from e

        if resp.status_code // 100 != 2:
            # The transition lookup is the spent oracle; "unknown id" must stay distinguishable.
            missing = operation == "get_transition_id" and _looks_not_found(resp)
            cls = TransitionNotFoundError if missing else NetworkError
            raise cls(
                f"unexpected response: {(resp.text or '')[:256]}",
                operation=operation,
                url=url,
                status=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(
                "expected JSON response", operation=operation, url=url, status=resp.status_code
            ) from e

    # ---- Chain ---------------------------------------------------------------

    def get_latest_height(self) -> int:
        height = self._fetch("get_latest_height", "/latest/height")
        if isinstance(height, bool) or not isinstance(height, int):
            raise NetworkError(
                f"latest height is not an integer: {height!r}",
                operation="get_latest_height",
                url=self._abs("/latest/height"),
            )
        return height

    def get_latest_block(self) -> JsonDict:
        return self._fetch("get_latest_block", "/latest/block")

    def get_latest_committee(self) -> JsonDict:
        return self._fetch("get_latest_committee", "/committee/latest")

    def get_state_root(self) -> str:
        return self._fetch("get_state_root", "/latest/stateRoot")

    def get_block(self, height: int) -> Block:
        return Block.from_json(self._fetch("get_block", f"/block/{int(height)}"))

    def get_block_range(self, start: int, end: int) -> List[Block]:
        """Blocks between ``start`` and ``end`` in ascending height order."""
        payload = self._fetch(
            "get_block_range", "/blocks", params={"start": int(start), "end": int(end)}
        )
        if not isinstance(payload, list):
            raise NetworkError(
                "block range response is not a list",
                operation="get_block_range",
                url=self._abs("/blocks"),
            )
        return blocks_from_json(payload)

    # ---- Transactions --------------------------------------------------------

    def get_transaction(self, transaction_id: str) -> JsonDict:
        return self._fetch("get_transaction", f"/transaction/{quote(transaction_id)}")

    def get_transactions(self, height: int) -> List[JsonDict]:
        return self._fetch("get_transactions", f"/block/{int(height)}/transactions")

    def get_transactions_in_mempool(self) -> List[JsonDict]:
        return self._fetch("get_transactions_in_mempool", "/memoryPool/transactions")

    def get_transition_id(self, input_or_output_id: str) -> str:
        """
        Transition id that consumed/produced ``input_or_output_id``.

        Raises TransitionNotFoundError if the id has no recorded transition.
        """
        return self._fetch(
            "get_transition_id", f"/find/transitionID/{quote(input_or_output_id)}"
        )

    def spent_status(self, serial_number: str) -> SpentStatus:
        """
        Ask the ledger whether a record serial number has been consumed.

        A serial number with a recorded transition is spent; one the ledger
        reports as unknown is unspent; any other failure is LOOKUP_FAILED.
        """
        try:
            self.get_transition_id(serial_number)
        except TransitionNotFoundError:
            return SpentStatus.UNSPENT
        except NetworkError as e:
            log.debug("spent lookup failed for %s: %s", serial_number, e)
            return SpentStatus.LOOKUP_FAILED
        return SpentStatus.SPENT

    def submit_transaction(self, transaction: Any) -> str:
        """
        Broadcast a serialized transaction; returns the transaction id.
        """
        body = transaction if isinstance(transaction, str) else str(transaction)
        url = self._abs("/transaction/broadcast")
        try:
            resp = self._http.post(
                url,
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(
                f"no response received: {e}", operation="submit_transaction", url=url
            ) from e
        if resp.status_code // 100 != 2:
            raise NetworkError(
                f"transaction rejected: {(resp.text or '')[:256]}",
                operation="submit_transaction",
                url=url,
                status=resp.status_code,
            )
        try:
            tx_id = resp.json()
        except ValueError as e:
            raise NetworkError(
                "expected JSON response",
                operation="submit_transaction",
                url=url,
                status=resp.status_code,
            ) from e
        log.info("submitted transaction %s", tx_id)
        return tx_id

    # ---- Programs ------------------------------------------------------------

    def get_program(self, program_id: str) -> str:
        """Source of a deployed program; ProgramNotFoundError if it is not on chain."""
        try:
            source = self._fetch("get_program", f"/program/{quote(program_id)}")
        except NetworkError as e:
            if e.status == 404:
                raise ProgramNotFoundError(program_id, reason="not deployed") from e
            raise
        if not isinstance(source, str):
            raise NetworkError(
                "program response is not a string",
                operation="get_program",
                url=self._abs(f"/program/{program_id}"),
            )
        return source

    def get_program_object(self, program: Union[str, Any]) -> Any:
        """
        Parse ``program`` as source code, or fetch it by id and parse that.
        Already-parsed program objects are returned unchanged.
        """
        if not isinstance(program, str):
            return program
        engine = self._require_engine("get_program_object")
        try:
            return engine.program_from_string(program)
        except ValueError:
            pass
        source = self.get_program(program)
        try:
            return engine.program_from_string(source)
        except ValueError as e:
            raise ProgramNotFoundError(
                program, reason="neither a program id nor valid program source"
            ) from e

    def get_program_import_names(self, program: Union[str, Any]) -> List[str]:
        return list(self.get_program_object(program).imports)

    def get_program_imports(self, program: Union[str, Any]) -> Dict[str, str]:
        """
        All programs ``program`` depends on, as {program_id: source}.

        Imports are resolved depth first: a dependency's own imports appear
        before it, and each program id appears once.
        """
        imports: Dict[str, str] = {}
        self._collect_imports(program, imports)
        return imports

    def _collect_imports(self, program: Union[str, Any], imports: Dict[str, str]) -> None:
        for import_id in self.get_program_object(program).imports:
            if import_id in imports:
                continue
            source = self.get_program(import_id)
            self._collect_imports(source, imports)
            imports.setdefault(import_id, source)

    def get_program_mapping_names(self, program_id: str) -> List[str]:
        return self._fetch("get_program_mapping_names", f"/program/{quote(program_id)}/mappings")

    def get_program_mapping_value(self, program_id: str, mapping_name: str, key: str) -> Any:
        return self._fetch(
            "get_program_mapping_value",
            f"/program/{quote(program_id)}/mapping/{quote(mapping_name)}/{quote(key)}",
        )

    def get_deployment_transaction_id_for_program(self, program: Union[str, Any]) -> str:
        program_id = program if isinstance(program, str) else program.id
        tx_id = self._fetch(
            "get_deployment_transaction_id_for_program",
            f"/find/transactionID/deployment/{quote(program_id)}",
        )
        return str(tx_id).replace('"', "")

    def get_deployment_transaction_for_program(self, program: Union[str, Any]) -> JsonDict:
        return self.get_transaction(self.get_deployment_transaction_id_for_program(program))

    # ---- Records -------------------------------------------------------------

    def find_unspent_records(
        self,
        start_height: int,
        end_height: Optional[int] = None,
        private_key: Any = None,
        amounts: Optional[List[int]] = None,
        max_microcredits: Optional[int] = None,
        nonces: Optional[List[str]] = None,
    ) -> List[Any]:
        """Shortcut for ``RecordScanner(self).find_unspent_records(...)``."""
        from ..records.discovery import RecordScanner

        scanner = RecordScanner(self, self._require_engine("find_unspent_records"), account=self.account)
        return scanner.find_unspent_records(
            start_height,
            end_height,
            private_key=private_key,
            amounts=amounts,
            max_microcredits=max_microcredits,
            nonces=nonces or (),
        )


__all__ = ["NetworkClient", "SpentStatus", "DEFAULT_NETWORK"]
