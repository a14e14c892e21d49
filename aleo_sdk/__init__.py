"""
Aleo SDK for Python
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import FeeSchedule, SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    AleoSdkError,
    InvalidRangeError,
    InvalidRecordFormatError,
    InvalidSearchParamsError,
    InvalidTransferTypeError,
    InvalidVerifyingKeyError,
    KeyIntegrityError,
    KeyNotFoundError,
    MissingPrivateKeyError,
    NetworkError,
    ProgramAlreadyExistsError,
    ProgramNotFoundError,
    RecordNotFoundError,
    TransitionNotFoundError,
)

# Account
from .account import Account  # noqa: F401

# Network
from .network.client import NetworkClient, SpentStatus  # noqa: F401

# Keys
from .keys.base import FunctionKeyPair  # noqa: F401
from .keys.cache import KeyCache  # noqa: F401
from .keys.offline import OfflineKeyProvider  # noqa: F401
from .keys.params import CachedKeySearch, RemoteKeySearch  # noqa: F401
from .keys.provider import NetworkKeyProvider  # noqa: F401

# Records
from .records.discovery import RecordScanner  # noqa: F401
from .records.provider import BlockHeightSearch, NetworkRecordProvider  # noqa: F401

# Programs
from .programs.manager import ProgramManager  # noqa: F401
from .programs.options import ExecutionOptions  # noqa: F401
from .programs.transfer import TransferType  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "SDKConfig", "FeeSchedule",
    "AleoSdkError", "NetworkError", "TransitionNotFoundError",
    "InvalidRangeError", "MissingPrivateKeyError", "InvalidTransferTypeError",
    "KeyNotFoundError", "KeyIntegrityError", "InvalidSearchParamsError", "InvalidVerifyingKeyError",
    "RecordNotFoundError", "InvalidRecordFormatError",
    "ProgramAlreadyExistsError", "ProgramNotFoundError",
    # Account
    "Account",
    # Network
    "NetworkClient", "SpentStatus",
    # Keys
    "FunctionKeyPair", "KeyCache", "NetworkKeyProvider", "OfflineKeyProvider",
    "RemoteKeySearch", "CachedKeySearch",
    # Records
    "RecordScanner", "NetworkRecordProvider", "BlockHeightSearch",
    # Programs
    "ProgramManager", "ExecutionOptions", "TransferType",
]
