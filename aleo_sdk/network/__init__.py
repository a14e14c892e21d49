from .client import DEFAULT_NETWORK, NetworkClient, SpentStatus

__all__ = ["NetworkClient", "SpentStatus", "DEFAULT_NETWORK"]
