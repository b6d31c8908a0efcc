"""Data model for the Brace interpreter.

This module defines the small set of records the scanner, the symbol
table builder and the interpreter pass between each other: source
addresses, call frames, the execution mode and the error descriptor
carried by every fatal error.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import FrozenSet, Optional


# Single-byte tokens with a fixed meaning. Any other token is an identifier.
RESERVED: FrozenSet[bytes] = frozenset(
    bytes([c]) for c in b'+-{}|#?!@'
)

WHITESPACE: FrozenSet[int] = frozenset(b' \t\n\r\x0b\x0c')


@dataclass(frozen=True)
class SourceAddress:
    """A resumable position: index of a source plus a byte offset in it."""
    source: int
    offset: int

    def __repr__(self) -> str:
        return f"{self.source}:{self.offset}"


@dataclass
class CallFrame:
    """Activation record pushed for every call.

    `depth_at_call` is the group nesting depth before the callee's body
    is entered; the frame is popped when a `}` brings the depth back to
    it. The entry frame has no return address.
    """
    depth_at_call: int
    return_address: Optional[SourceAddress]
    function_name: str

    @property
    def is_entry(self) -> bool:
        return self.return_address is None


class Mode(enum.Enum):
    SUCCESS = 'success'
    FAILED = 'failed'


@dataclass
class ErrorVal:
    """Describes a fatal error.

    `name` is one of the error kinds (for example `UnclosedGroup` or
    `UndefinedFunctionCall`); `message` is a human readable description
    that usually names the source and byte offset involved.
    """
    name: str
    message: str
