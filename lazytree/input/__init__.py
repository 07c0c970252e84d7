"""Input-layer public API: key decoding and the operation state machine."""

from .keys import CANCEL_KEYS, NAMED_KEYS, QUIT_KEYS, is_printable_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .machine import OperationStateMachine
from .operation import Operation
from .reader import ESC_SEQUENCE_TIMEOUT_MS, KeyReader

__all__ = [
    "CANCEL_KEYS",
    "NAMED_KEYS",
    "QUIT_KEYS",
    "is_printable_key",
    "KeyComboBinding",
    "KeyComboRegistry",
    "Operation",
    "OperationStateMachine",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyReader",
]
