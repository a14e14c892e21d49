"""
Shared pytest fixtures and fakes:
- FakeEngine: deterministic stand-in for the cryptographic engine
- FakeSession / FakeResponse: scripted replacement for requests.Session
- FakeGateway: scripted ledger for record discovery (blocks, spent oracle)
- make_block / make_ciphertext helpers building gateway-shaped JSON

Fake formats
------------
private key   "APrivateKey1<owner>"
ciphertext    "record1:<owner>:<microcredits>:<nonce>"
plaintext     "plain:<owner>:<microcredits>:<nonce>"
serial        "sn:<nonce>"
key bytes     b"prover:<name>:<payload>" / b"verifier:<name>:<payload>"
program       "program <id>;\\nimport <dep>;\\n..."
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

import pytest
import requests

from aleo_sdk.errors import NetworkError
from aleo_sdk.network.client import SpentStatus
from aleo_sdk.types.core import Block

HOST = "https://api.test.aleo"
BASE = f"{HOST}/testnet3"


# ---------- ENGINE FAKES ----------


class FakeAddress:
    def __init__(self, owner: str) -> None:
        self.owner = owner

    def verify(self, message: bytes, signature: Any) -> bool:
        return signature == b"sig:" + self.owner.encode() + b":" + message

    def __str__(self) -> str:
        return f"aleo1{self.owner}"


class FakeViewKey:
    def __init__(self, owner: str) -> None:
        self.owner = owner

    def decrypt(self, ciphertext: str) -> "FakeRecord":
        record = FakeCiphertext.parse(ciphertext)
        if not record.is_owner(self):
            raise ValueError("not owned by this view key")
        return record.decrypt(self)


class FakePrivateKey:
    def __init__(self, owner: str) -> None:
        self.owner = owner

    def view_key(self) -> FakeViewKey:
        return FakeViewKey(self.owner)

    def address(self) -> FakeAddress:
        return FakeAddress(self.owner)

    def sign(self, message: bytes) -> bytes:
        return b"sig:" + self.owner.encode() + b":" + message

    def __str__(self) -> str:
        return f"APrivateKey1{self.owner}"


class FakeRecord:
    """Plaintext credits record."""

    def __init__(self, owner: str, microcredits: int, nonce: str) -> None:
        self.owner = owner
        self.microcredits = microcredits
        self.nonce = nonce

    def serial_number(self, private_key: Any, program_id: str, record_name: str) -> str:
        if private_key.owner != self.owner:
            raise ValueError("wrong private key")
        return f"sn:{self.nonce}"

    def __str__(self) -> str:
        return f"plain:{self.owner}:{self.microcredits}:{self.nonce}"

    def __repr__(self) -> str:
        return f"FakeRecord({self.nonce}, {self.microcredits})"


class FakeCiphertext:
    def __init__(self, owner: str, microcredits: int, nonce: str) -> None:
        self.owner = owner
        self.microcredits = microcredits
        self.nonce = nonce

    @staticmethod
    def parse(value: str) -> "FakeCiphertext":
        parts = value.split(":")
        if len(parts) != 4 or parts[0] != "record1":
            raise ValueError(f"malformed ciphertext {value!r}")
        return FakeCiphertext(parts[1], int(parts[2]), parts[3])

    def is_owner(self, view_key: FakeViewKey) -> bool:
        return view_key.owner == self.owner

    def decrypt(self, view_key: FakeViewKey) -> FakeRecord:
        return FakeRecord(self.owner, self.microcredits, self.nonce)


class FakeKey:
    def __init__(self, kind: str, name: str, payload: str = "v1") -> None:
        self.kind = kind
        self.name = name
        self.payload = payload

    @staticmethod
    def from_bytes(kind: str, data: bytes) -> "FakeKey":
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError("not a key") from e
        parts = text.split(":", 2)
        if len(parts) != 3 or parts[0] != kind:
            raise ValueError(f"not a {kind} key")
        return FakeKey(kind, parts[1], parts[2])

    def to_bytes(self) -> bytes:
        return f"{self.kind}:{self.name}:{self.payload}".encode()

    def is_prover_for(self, function_name: str) -> bool:
        return self.kind == "prover" and self.name == function_name and self.payload != "forged"

    def is_verifier_for(self, function_name: str) -> bool:
        return self.kind == "verifier" and self.name == function_name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FakeKey) and other.to_bytes() == self.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"FakeKey({self.kind}, {self.name}, {self.payload})"


class FakeProgram:
    def __init__(self, program_id: str, imports: List[str], source: str) -> None:
        self.id = program_id
        self.imports = imports
        self._source = source

    def __str__(self) -> str:
        return self._source


def make_program(program_id: str, imports: Iterable[str] = ()) -> str:
    lines = [f"import {i};" for i in imports]
    lines.append(f"program {program_id};")
    lines.append("function main:")
    return "\n".join(lines) + "\n"


class FakeTransaction:
    def __init__(self, kind: str, args: Dict[str, Any]) -> None:
        self.kind = kind
        self.args = args

    def __str__(self) -> str:
        return json.dumps({"type": self.kind})


class FakeExecutionResponse:
    def __init__(self, outputs: List[str], valid: Optional[bool] = True) -> None:
        self._outputs = outputs
        self.valid = valid

    def outputs(self) -> List[str]:
        return list(self._outputs)


class FakeEngine:
    """
    Deterministic engine: parses the fake string formats above and records
    every builder call in ``calls`` as (builder_name, kwargs).
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    # --- parsing
    def private_key_from_string(self, value: str) -> FakePrivateKey:
        if not value.startswith("APrivateKey1"):
            raise ValueError("malformed private key")
        return FakePrivateKey(value[len("APrivateKey1"):])

    def new_private_key(self, seed: Optional[bytes] = None) -> FakePrivateKey:
        return FakePrivateKey("fresh" if seed is None else seed.hex())

    def record_ciphertext_from_string(self, value: str) -> FakeCiphertext:
        return FakeCiphertext.parse(value)

    def record_plaintext_from_string(self, value: str) -> FakeRecord:
        parts = value.split(":")
        if len(parts) != 4 or parts[0] != "plain":
            raise ValueError(f"malformed plaintext {value!r}")
        return FakeRecord(parts[1], int(parts[2]), parts[3])

    def program_from_string(self, source: str) -> FakeProgram:
        program_id = None
        imports: List[str] = []
        for line in source.splitlines():
            line = line.strip().rstrip(";")
            if line.startswith("import "):
                imports.append(line[len("import "):])
            elif line.startswith("program "):
                program_id = line[len("program "):]
        if program_id is None:
            raise ValueError("not a program")
        return FakeProgram(program_id, imports, source)

    def credits_program(self) -> FakeProgram:
        return self.program_from_string(make_program("credits.aleo"))

    def proving_key_from_bytes(self, data: bytes) -> FakeKey:
        return FakeKey.from_bytes("prover", data)

    def verifying_key_from_bytes(self, data: bytes) -> FakeKey:
        return FakeKey.from_bytes("verifier", data)

    def verifying_key_from_string(self, value: str) -> FakeKey:
        if not value.startswith("verifier-text:"):
            raise ValueError("not a text verifying key")
        _, name, payload = value.split(":", 2)
        return FakeKey("verifier", name, payload)

    def credits_verifying_key(self, function_name: str) -> FakeKey:
        return FakeKey("verifier", function_name, "builtin")

    # --- builders
    def _build(self, kind: str, **kwargs: Any) -> FakeTransaction:
        self.calls.append((kind, kwargs))
        return FakeTransaction(kind, kwargs)

    def build_deployment_transaction(self, **kwargs: Any) -> FakeTransaction:
        return self._build("deploy", **kwargs)

    def build_execution_transaction(self, **kwargs: Any) -> FakeTransaction:
        return self._build("execute", **kwargs)

    def build_join_transaction(self, **kwargs: Any) -> FakeTransaction:
        return self._build("join", **kwargs)

    def build_split_transaction(self, **kwargs: Any) -> FakeTransaction:
        return self._build("split", **kwargs)

    def build_transfer_transaction(self, **kwargs: Any) -> FakeTransaction:
        return self._build("transfer", **kwargs)

    def execute_function_offline(self, **kwargs: Any) -> FakeExecutionResponse:
        self.calls.append(("run", kwargs))
        return FakeExecutionResponse([f"{len(kwargs['inputs'])}u32"])

    def synthesize_key_pair(self, **kwargs: Any) -> Tuple[FakeKey, FakeKey]:
        self.calls.append(("synthesize", kwargs))
        name = kwargs["function_name"]
        return FakeKey("prover", name, "synth"), FakeKey("verifier", name, "synth")

    def verify_execution(self, response: FakeExecutionResponse) -> bool:
        if response.valid is None:
            raise ValueError("no execution in response")
        return response.valid


def prover_bytes(name: str, payload: str = "v1") -> bytes:
    return FakeKey("prover", name, payload).to_bytes()


# ---------- HTTP FAKES ----------


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        json_data: Any = None,
        *,
        text: Optional[str] = None,
        content: Optional[bytes] = None,
    ) -> None:
        self.status_code = status_code
        self._json = json_data
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text
        self.content = content if content is not None else text.encode("utf-8")

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("no JSON body")
        return self._json


Route = Union[FakeResponse, Exception, Callable[..., FakeResponse]]


class FakeSession:
    """
    Minimal requests.Session stand-in.

    ``routes`` maps "METHOD url" (url without query string) to a FakeResponse,
    an exception to raise, or a callable(params=..., data=...) returning a
    FakeResponse. Unknown routes answer 404.
    """

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[Tuple[str, str, Any]] = []
        self.headers: Dict[str, str] = {}

    def _dispatch(self, method: str, url: str, payload: Any) -> FakeResponse:
        self.calls.append((method, url, payload))
        route = self.routes.get(f"{method} {url}")
        if route is None:
            return FakeResponse(404, text="Not Found")
        if isinstance(route, Exception):
            raise route
        if callable(route) and not isinstance(route, FakeResponse):
            return route(payload)
        return route

    def get(self, url: str, params: Any = None, headers: Any = None, timeout: Any = None) -> FakeResponse:
        return self._dispatch("GET", url, params)

    def post(self, url: str, data: Any = None, headers: Any = None, timeout: Any = None) -> FakeResponse:
        return self._dispatch("POST", url, data)

    def count(self, method: str, url: str) -> int:
        return sum(1 for m, u, _ in self.calls if m == method and u == url)


# ---------- LEDGER FAKES ----------


def make_ciphertext(owner: str, microcredits: int, nonce: str) -> str:
    return f"record1:{owner}:{microcredits}:{nonce}"


def make_block(
    height: int,
    ciphertexts: Iterable[str] = (),
    *,
    program: str = "credits.aleo",
    tx_type: str = "execute",
) -> Dict[str, Any]:
    outputs = [{"type": "record", "id": f"{height}-{i}", "value": c} for i, c in enumerate(ciphertexts)]
    outputs.append({"type": "public", "id": f"{height}-pub", "value": "5u64"})
    return {
        "block_hash": f"ab1{height}",
        "header": {"metadata": {"height": height}},
        "transactions": [
            {
                "status": "accepted",
                "type": tx_type,
                "index": 0,
                "transaction": {
                    "type": tx_type,
                    "id": f"at1{height}",
                    "execution": {
                        "transitions": [
                            {
                                "id": f"au1{height}",
                                "program": program,
                                "function": "transfer_private",
                                "outputs": outputs,
                            }
                        ]
                    },
                },
            }
        ],
    }


class FakeGateway:
    """
    Scripted ledger for RecordScanner.

    ``blocks`` maps height -> ciphertexts. Block ranges are half open
    ([start, end)) like the REST endpoint. ``fail_chunks`` makes the next N
    range fetches raise NetworkError.
    """

    def __init__(
        self,
        latest_height: int,
        blocks: Optional[Mapping[int, List[str]]] = None,
        *,
        spent: Iterable[str] = (),
        lookup_failures: Iterable[str] = (),
        fail_chunks: int = 0,
    ) -> None:
        self.latest_height = latest_height
        self.blocks = dict(blocks or {})
        self.spent: Set[str] = set(spent)
        self.lookup_failures: Set[str] = set(lookup_failures)
        self.fail_chunks = fail_chunks
        self.range_calls: List[Tuple[int, int]] = []
        self.spent_calls: List[str] = []

    def get_latest_height(self) -> int:
        return self.latest_height

    def get_block_range(self, start: int, end: int) -> List[Block]:
        self.range_calls.append((start, end))
        if self.fail_chunks > 0:
            self.fail_chunks -= 1
            raise NetworkError("boom", operation="get_block_range", status=503)
        return [
            Block.from_json(make_block(h, self.blocks[h]))
            for h in range(start, end)
            if h in self.blocks
        ]

    def spent_status(self, serial_number: str) -> SpentStatus:
        self.spent_calls.append(serial_number)
        if serial_number in self.lookup_failures:
            return SpentStatus.LOOKUP_FAILED
        if serial_number in self.spent:
            return SpentStatus.SPENT
        return SpentStatus.UNSPENT


# ---------- FIXTURES ----------


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def alice() -> FakePrivateKey:
    return FakePrivateKey("alice")


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def transport_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
