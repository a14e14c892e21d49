from .discovery import RecordScanner
from .provider import BlockHeightSearch, NetworkRecordProvider, RecordProvider

__all__ = ["RecordScanner", "BlockHeightSearch", "NetworkRecordProvider", "RecordProvider"]
