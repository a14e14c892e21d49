import pytest

from aleo_sdk.config import FeeSchedule, SDKConfig
from aleo_sdk.network.client import NetworkClient
from aleo_sdk.version import __version__


def test_defaults():
    cfg = SDKConfig()
    assert cfg.base_url == "https://api.explorer.aleo.org/v1/testnet3"
    assert cfg.use_key_cache is True
    assert cfg.fees == FeeSchedule()
    assert cfg.http_headers()["User-Agent"] == f"aleo-sdk-py/{__version__}"


def test_from_env(monkeypatch):
    monkeypatch.setenv("ALEO_HOST", "http://localhost:3030/")
    monkeypatch.setenv("ALEO_NETWORK", "mainnet")
    monkeypatch.setenv("ALEO_USE_KEY_CACHE", "0")
    monkeypatch.setenv("ALEO_TIMEOUT", "5")
    cfg = SDKConfig.from_env()
    assert cfg.base_url == "http://localhost:3030/mainnet"
    assert cfg.use_key_cache is False
    assert cfg.request_timeout == 5.0


def test_from_env_rejects_bad_scheme(monkeypatch):
    monkeypatch.setenv("ALEO_KEY_STORE", "ftp://keys.example")
    with pytest.raises(ValueError):
        SDKConfig.from_env()


def test_with_overrides_keeps_fees_and_ignores_unknown():
    fees = FeeSchedule(bond_public=5.0)
    base = SDKConfig(fees=fees)
    cfg = SDKConfig.with_overrides(base, host="https://node.example", colour="blue")
    assert cfg.host == "https://node.example"
    assert cfg.fees.bond_public == 5.0
    assert base.host != cfg.host
    with pytest.raises(ValueError):
        SDKConfig.with_overrides(base, host="node.example")


def test_to_dict():
    d = SDKConfig(request_timeout=3).to_dict()
    assert d["request_timeout"] == 3.0
    assert set(d) == {"host", "network", "key_store", "use_key_cache", "request_timeout", "user_agent"}


def test_client_from_config():
    client = NetworkClient.from_config(SDKConfig(host="https://node.example/v1/", network="mainnet"))
    assert client.host == "https://node.example/v1/mainnet"

