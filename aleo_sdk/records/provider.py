"""
Record providers: where ``ProgramManager`` gets fee and amount records from.

``NetworkRecordProvider`` searches the ledger through a ``RecordScanner`` on
behalf of one account. Only ``credits.aleo`` credits records are supported;
the generic ``find_record``/``find_records`` entry points are reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Protocol, Sequence

from ..errors import InvalidRangeError, RecordNotFoundError
from ..types.core import CREDITS_PROGRAM_ID
from .discovery import RecordScanner

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BlockHeightSearch:
    """Block range to search; ``end_height=None`` means the latest height."""

    start_height: int = 0
    end_height: Optional[int] = None


class RecordProvider(Protocol):
    def find_credits_record(
        self,
        microcredits: int,
        unspent: bool = True,
        nonces: Iterable[str] = (),
        search: Optional[BlockHeightSearch] = None,
    ) -> Any: ...

    def find_credits_records(
        self,
        microcredits: Sequence[int],
        unspent: bool = True,
        nonces: Iterable[str] = (),
        search: Optional[BlockHeightSearch] = None,
    ) -> List[Any]: ...


class NetworkRecordProvider:
    def __init__(
        self,
        account: Any,
        network_client: Any,
        *,
        engine: Any = None,
        scanner: Optional[RecordScanner] = None,
    ) -> None:
        self.account = account
        self._client = network_client
        engine = engine if engine is not None else getattr(network_client, "engine", None)
        self._scanner = scanner or RecordScanner(network_client, engine, account=account)

    def set_account(self, account: Any) -> None:
        self.account = account
        self._scanner.account = account

    def find_credits_records(
        self,
        microcredits: Sequence[int],
        unspent: bool = True,
        nonces: Iterable[str] = (),
        search: Optional[BlockHeightSearch] = None,
    ) -> List[Any]:
        """
        Unspent credits records, one strictly larger than each amount in
        ``microcredits``. Only unspent records are ever searched, ``unspent``
        is accepted for interface compatibility.
        """
        search = search or BlockHeightSearch()
        start = search.start_height
        end = search.end_height
        if end is None:
            end = self._client.get_latest_height()
        if start >= end:
            raise InvalidRangeError("start height must be less than end height", start, end)
        log.debug("searching credits records in [%d, %d] for %s", start, end, list(microcredits))
        return self._scanner.find_unspent_records(
            start,
            end,
            private_key=self.account.private_key if self.account is not None else None,
            amounts=list(microcredits),
            nonces=nonces,
        )

    def find_credits_record(
        self,
        microcredits: int,
        unspent: bool = True,
        nonces: Iterable[str] = (),
        search: Optional[BlockHeightSearch] = None,
    ) -> Any:
        records = self.find_credits_records([microcredits], unspent, nonces, search)
        if not records:
            raise RecordNotFoundError(program=CREDITS_PROGRAM_ID, microcredits=microcredits)
        return records[0]

    def find_record(self, *args: Any, **kwargs: Any) -> Any:
        raise NotImplementedError("generic record search is not supported; use find_credits_record")

    def find_records(self, *args: Any, **kwargs: Any) -> List[Any]:
        raise NotImplementedError("generic record search is not supported; use find_credits_records")


__all__ = ["BlockHeightSearch", "RecordProvider", "NetworkRecordProvider"]
