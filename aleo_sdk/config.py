"""
SDK configuration: ledger host, network segment, key store and HTTP behavior.

- Loads sane defaults and supports overrides via environment variables (ALEO_*).
- Carries the default fee schedule used by the staking convenience operations.
- Provides helpers for building HTTP headers and validating endpoints.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .version import __version__

_DEFAULT_HOST = "https://api.explorer.aleo.org/v1"
_DEFAULT_NETWORK = "testnet3"
_DEFAULT_KEY_STORE = "https://testnet3.parameters.aleo.org/"

_TRUTHY = {"1", "true", "yes", "on"}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _env_flag(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in _TRUTHY


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


@dataclass(frozen=True, slots=True)
class FeeSchedule:
    """Default fees (in credits) for the convenience staking operations."""

    bond_public: float = 0.86
    unbond_public: float = 1.3
    claim_unbond_public: float = 2.0
    set_validator_state: float = 1.0
    unbond_delegator_as_validator: float = 1.0


@dataclass(slots=True)
class SDKConfig:
    # Core
    host: str = field(default_factory=lambda: _DEFAULT_HOST)
    network: str = _DEFAULT_NETWORK
    key_store: str = field(default_factory=lambda: _DEFAULT_KEY_STORE)
    # Key provider behavior
    use_key_cache: bool = True
    # HTTP behavior
    request_timeout: float = 30.0
    # Headers / identity
    user_agent: str = field(default_factory=lambda: f"aleo-sdk-py/{__version__}")
    fees: FeeSchedule = field(default_factory=FeeSchedule)

    @classmethod
    def from_env(cls, prefix: str = "ALEO_") -> "SDKConfig":
        """
        Create config from environment variables:

        ALEO_HOST            (http/https) ledger API base address
        ALEO_NETWORK         network path segment appended to the host
        ALEO_KEY_STORE       (http/https) base URL of the proving key store
        ALEO_USE_KEY_CACHE   (1/0) cache fetched function keys in memory
        ALEO_TIMEOUT         (float seconds, per HTTP request)
        ALEO_USER_AGENT      (str)
        """
        host = _env(f"{prefix}HOST", _DEFAULT_HOST)
        network = _env(f"{prefix}NETWORK", _DEFAULT_NETWORK)
        key_store = _env(f"{prefix}KEY_STORE", _DEFAULT_KEY_STORE)
        timeout = float(_env(f"{prefix}TIMEOUT", "30.0"))
        ua = _env(f"{prefix}USER_AGENT", f"aleo-sdk-py/{__version__}")

        _ensure_scheme(host, ("http", "https"))
        _ensure_scheme(key_store, ("http", "https"))

        return cls(
            host=host or _DEFAULT_HOST,
            network=network or _DEFAULT_NETWORK,
            key_store=key_store or _DEFAULT_KEY_STORE,
            use_key_cache=_env_flag(f"{prefix}USE_KEY_CACHE", True),
            request_timeout=timeout,
            user_agent=ua or f"aleo-sdk-py/{__version__}",
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data["fees"] = base.fees
        data.update({k: v for k, v in overrides.items() if k in data})
        if "host" in overrides:
            _ensure_scheme(data["host"], ("http", "https"))
        if "key_store" in overrides:
            _ensure_scheme(data["key_store"], ("http", "https"))
        return cls(**data)

    @property
    def base_url(self) -> str:
        """Host with the network segment appended, e.g. https://host/v1/testnet3."""
        return f"{self.host.rstrip('/')}/{self.network}"

    def http_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "network": self.network,
            "key_store": self.key_store,
            "use_key_cache": bool(self.use_key_cache),
            "request_timeout": float(self.request_timeout),
            "user_agent": self.user_agent,
        }


__all__ = ["SDKConfig", "FeeSchedule"]
