"""
Typed error classes for the Python SDK.

These are raised by the network client, key providers, record discovery and the
program manager so callers can catch specific failure modes while still being
able to catch the base `AleoSdkError`.

Every error renders a deterministic, human-readable message that names the
resource involved (record, key, program, block range) and the identifier that
was attempted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

__all__ = [
    "AleoSdkError",
    "NetworkError",
    "TransitionNotFoundError",
    "InvalidRangeError",
    "MissingPrivateKeyError",
    "KeyNotFoundError",
    "KeyIntegrityError",
    "InvalidSearchParamsError",
    "InvalidVerifyingKeyError",
    "RecordNotFoundError",
    "InvalidRecordFormatError",
    "ProgramAlreadyExistsError",
    "ProgramNotFoundError",
    "InvalidTransferTypeError",
]


def _clip(value: str, limit: int = 64) -> str:
    return value if len(value) <= limit else value[:limit] + "..."


class AleoSdkError(Exception):
    """Base class for all SDK errors."""


# --- Network -----------------------------------------------------------------


@dataclass(slots=True)
class NetworkError(AleoSdkError):
    """
    Raised when a call against the ledger gateway fails.

    Fields:
      - message: human-readable description
      - operation: gateway operation name (e.g. "get_program")
      - url: request URL if known
      - status: HTTP status code, None when no response was received
    """

    message: str
    operation: Optional[str] = None
    url: Optional[str] = None
    status: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"NetworkError[{self.operation or '-'}]"]
        if self.url:
            parts.append(self.url)
        if self.status is not None:
            parts.append(f"http={self.status}")
        parts.append(self.message)
        return " ".join(parts)


@dataclass(slots=True)
class TransitionNotFoundError(NetworkError):
    """The gateway has no transition recorded for the requested id (HTTP 404)."""


# --- Validation ----------------------------------------------------------------


@dataclass(slots=True)
class InvalidRangeError(AleoSdkError):
    """Block height bounds are malformed (negative start, start past end, ...)."""

    message: str
    start_height: Optional[int] = None
    end_height: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"InvalidRange [{self.start_height}, {self.end_height}]: {self.message}"


@dataclass(slots=True)
class MissingPrivateKeyError(AleoSdkError):
    """No private key was passed and no account is configured."""

    operation: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return (
            f"MissingPrivateKey: no private key provided to {self.operation} "
            "and no account configured"
        )


@dataclass(slots=True)
class InvalidTransferTypeError(AleoSdkError):
    transfer_type: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return (
            f"InvalidTransferType: {self.transfer_type!r}; valid transfer types are "
            "'private', 'privateToPublic', 'public' and 'publicToPrivate'"
        )


# --- Keys --------------------------------------------------------------------


@dataclass(slots=True)
class KeyNotFoundError(AleoSdkError):
    locator: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"KeyNotFound: no proving/verifying keys cached for {self.locator!r}"


@dataclass(slots=True)
class KeyIntegrityError(AleoSdkError):
    """Keys exist but do not match the identity expected for their locator."""

    locator: str
    message: str = "keys do not match the expected keys"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"KeyIntegrity [{self.locator}]: {self.message}"


@dataclass(slots=True)
class InvalidSearchParamsError(AleoSdkError):
    params: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return (
            "InvalidSearchParams: provide either a cache key or both a prover URI "
            f"and a verifier URI (got {self.params})"
        )


@dataclass(slots=True)
class InvalidVerifyingKeyError(AleoSdkError):
    uri: str
    reason: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f": {self.reason}" if self.reason else ""
        return f"InvalidVerifyingKey [{self.uri}]{suffix}"


# --- Records -----------------------------------------------------------------


@dataclass(slots=True)
class RecordNotFoundError(AleoSdkError):
    message: str = "no unspent record found"
    program: Optional[str] = None
    microcredits: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        bits = ["RecordNotFound:", self.message]
        if self.program:
            bits.append(f"program={self.program}")
        if self.microcredits is not None:
            bits.append(f"microcredits>{self.microcredits}")
        return " ".join(bits)


@dataclass(slots=True)
class InvalidRecordFormatError(AleoSdkError):
    record: str
    reason: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f": {self.reason}" if self.reason else ""
        return f"InvalidRecordFormat [{_clip(self.record)}]{suffix}"


# --- Programs ----------------------------------------------------------------


@dataclass(slots=True)
class ProgramAlreadyExistsError(AleoSdkError):
    program_id: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return (
            f"ProgramAlreadyExists: {self.program_id} is already deployed, "
            "please rename your program"
        )


@dataclass(slots=True)
class ProgramNotFoundError(AleoSdkError):
    program_id: str
    reason: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f": {self.reason}" if self.reason else ""
        return f"ProgramNotFound [{_clip(self.program_id)}]{suffix}"
