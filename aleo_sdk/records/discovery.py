"""
aleo_sdk.records.discovery
==========================

Scan the ledger for unspent records owned by a private key.

Blocks are fetched newest first in chunks of ``chunk_size`` heights. For every
confirmed execute transaction, each record output of the target program is
checked in order:

1. parse the ciphertext and keep it only if the view key owns it;
2. decrypt it and drop it if its nonce is excluded (the caller's nonces plus
   every record already accepted in this scan);
3. derive its serial number and ask the ledger whether it was spent.

Only records the ledger positively reports as unspent are returned. A failed
spent lookup drops the record (it is logged), it never passes as unspent.

A chunk that cannot be fetched is retried; once more than ``max_failures``
fetches have failed the scan stops and returns what it found so far.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Set

from ..account import resolve_private_key
from ..errors import InvalidRangeError, NetworkError
from ..network.client import SpentStatus
from ..types.core import CREDITS_PROGRAM_ID, CREDITS_RECORD_NAME, Block

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 50
DEFAULT_MAX_FAILURES = 10


@dataclass(slots=True)
class _Selection:
    """Running state of the amount and total matching."""

    amounts: Sequence[int]
    max_microcredits: Optional[int]
    records: List[Any] = field(default_factory=list)
    total: int = 0
    next_amount: int = 0

    def offer(self, record: Any) -> bool:
        """Accept ``record`` if it satisfies the next requirement."""
        microcredits = int(record.microcredits)
        if self.amounts:
            if microcredits <= self.amounts[self.next_amount]:
                return False
            self.next_amount += 1
        self.records.append(record)
        self.total += microcredits
        return True

    @property
    def done(self) -> bool:
        if self.amounts and self.next_amount >= len(self.amounts):
            return True
        return self.max_microcredits is not None and self.total >= self.max_microcredits


class RecordScanner:
    """
    Finds unspent records by walking block ranges through a ``NetworkClient``.

    Parameters
    ----------
    network_client : NetworkClient
        Source of blocks, the latest height and the spent oracle.
    engine : ProofEngine
        Parses, decrypts and derives serial numbers for records.
    account : Account | None
        Fallback owner when no private key is passed to a scan.
    """

    def __init__(
        self,
        network_client: Any,
        engine: Any,
        *,
        account: Any = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_failures: int = DEFAULT_MAX_FAILURES,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._client = network_client
        self._engine = engine
        self.account = account
        self.chunk_size = int(chunk_size)
        self.max_failures = int(max_failures)

    def find_unspent_records(
        self,
        start_height: int,
        end_height: Optional[int] = None,
        *,
        private_key: Any = None,
        amounts: Optional[Sequence[int]] = None,
        max_microcredits: Optional[int] = None,
        nonces: Iterable[str] = (),
        program_id: str = CREDITS_PROGRAM_ID,
        record_name: str = CREDITS_RECORD_NAME,
    ) -> List[Any]:
        """
        Unspent records owned by ``private_key`` in ``[start_height, end_height]``.

        ``end_height`` defaults to (and is capped at) the latest height. With
        ``amounts``, one record strictly larger than each amount is collected
        in turn; with ``max_microcredits``, the scan stops once the collected
        total reaches it.

        Raises InvalidRangeError for a negative start or a start past the end,
        MissingPrivateKeyError without a key or account, and NetworkError if
        the latest height cannot be read.
        """
        if start_height < 0:
            raise InvalidRangeError("start height must be non-negative", start_height, end_height)
        pk = resolve_private_key(self._engine, private_key, self.account, "find_unspent_records")
        view_key = pk.view_key()

        latest = self._client.get_latest_height()
        end = latest if end_height is None or end_height > latest else int(end_height)
        if start_height > end:
            raise InvalidRangeError("start height must not exceed end height", start_height, end)

        excluded: Set[str] = set(nonces)
        selection = _Selection(amounts=list(amounts or ()), max_microcredits=max_microcredits)
        failures = 0

        while end > start_height:
            lo = max(end - self.chunk_size, start_height)
            try:
                blocks = self._client.get_block_range(lo, end)
            except NetworkError as e:
                failures += 1
                log.warning("error fetching blocks %d-%d: %s", lo, end, e)
                if failures > self.max_failures:
                    log.warning(
                        "%d failures fetching blocks, returning %d records found so far",
                        failures,
                        len(selection.records),
                    )
                    return selection.records
                continue
            end = lo
            for block in blocks:
                if self._scan_block(block, pk, view_key, program_id, record_name, excluded, selection):
                    return selection.records

        return selection.records

    def _scan_block(
        self,
        block: Block,
        private_key: Any,
        view_key: Any,
        program_id: str,
        record_name: str,
        excluded: Set[str],
        selection: _Selection,
    ) -> bool:
        """Offer every unspent record in ``block``; True once the selection is complete."""
        for transition in block.execute_transitions(program_id):
            for output in transition.record_outputs():
                record = self._owned_plaintext(output.value, view_key)
                if record is None:
                    continue
                nonce = record.nonce
                if nonce in excluded:
                    continue
                try:
                    serial = record.serial_number(private_key, program_id, record_name)
                except ValueError as e:
                    log.debug("could not derive serial number in block %s: %s", block.height, e)
                    continue

                status = self._client.spent_status(serial)
                if status is SpentStatus.SPENT:
                    continue
                if status is SpentStatus.LOOKUP_FAILED:
                    log.warning("skipping record %s: spent status unknown", nonce)
                    continue

                if selection.offer(record):
                    excluded.add(nonce)
                    if selection.done:
                        return True
        return False

    def _owned_plaintext(self, ciphertext: Optional[str], view_key: Any) -> Optional[Any]:
        if not ciphertext:
            return None
        try:
            record = self._engine.record_ciphertext_from_string(ciphertext)
            if not record.is_owner(view_key):
                return None
            return record.decrypt(view_key)
        except ValueError as e:
            log.debug("skipping unreadable record output: %s", e)
            return None


__all__ = ["RecordScanner", "DEFAULT_CHUNK_SIZE", "DEFAULT_MAX_FAILURES"]
