from .manager import ProgramManager
from .options import ExecutionOptions, credits_to_microcredits, microcredits_literal
from .transfer import TransferType

__all__ = [
    "ProgramManager",
    "ExecutionOptions",
    "credits_to_microcredits",
    "microcredits_literal",
    "TransferType",
]
