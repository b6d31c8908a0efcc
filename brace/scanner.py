"""Lazy tokenizer and group skipper for Brace sources.

Brace programs are never parsed into a tree. The interpreter reads one
token at a time straight from a seekable byte stream and uses the
stream position as its program counter. This module provides the two
primitives that move that position forward:

* `next_token` reads the next token, skipping whitespace and comments.
  A token is a maximal run of bytes that are neither whitespace nor part
  of a `#` comment. After the call the stream sits just past the byte
  that ended the token (or past the comment that ended it), which is
  where definition and return addresses are captured.

* `skip_group` advances past the `}` matching an already consumed `{`
  without interpreting anything else.

Only the current token is ever buffered; nothing is read ahead.
"""

from __future__ import annotations

from typing import BinaryIO, Optional, Tuple

from .errors import ScanError
from .types import RESERVED, WHITESPACE, ErrorVal

OPEN = b'{'
CLOSE = b'}'
ALTERNATIVE = b'|'
COMMENT = b'#'


def is_reserved(token: bytes) -> bool:
    return token in RESERVED


def is_identifier(token: bytes) -> bool:
    # One-byte tokens outside the reserved set are identifiers too.
    return token not in RESERVED


def _skip_comment(stream: BinaryIO) -> None:
    while True:
        c = stream.read(1)
        if not c or c == b'\n':
            return


def scan_token(stream: BinaryIO) -> Optional[Tuple[int, bytes]]:
    """Read the next token and report the offset of its first byte.

    Returns `(offset, token)`, or None when the stream is exhausted
    without a pending token.
    """
    while True:
        c = stream.read(1)
        if not c:
            return None
        if c[0] in WHITESPACE:
            continue
        if c == COMMENT:
            _skip_comment(stream)
            continue
        break
    start = stream.tell() - 1
    token = bytearray(c)
    while True:
        c = stream.read(1)
        if not c or c[0] in WHITESPACE:
            break
        if c == COMMENT:
            # a comment may start right after a token, e.g. `+# note`
            _skip_comment(stream)
            break
        token += c
    return start, bytes(token)


def next_token(stream: BinaryIO) -> Optional[bytes]:
    """Return the next token from `stream`, or None at end of stream."""
    scanned = scan_token(stream)
    if scanned is None:
        return None
    return scanned[1]


def skip_group(stream: BinaryIO, source_name: str = '<source>') -> int:
    """Advance `stream` past the `}` matching an already consumed `{`.

    Nested groups are counted with a local counter; the close seen at
    local depth 0 is the match. Returns the offset at which that `}`
    starts so callers can seek back onto it. Raises `ScanError`
    (`UnclosedGroup`) if the stream ends first.
    """
    opened_at = stream.tell()
    depth = 0
    while True:
        scanned = scan_token(stream)
        if scanned is None:
            raise ScanError(ErrorVal(
                'UnclosedGroup',
                f"group opened before offset {opened_at} in {source_name} is never closed",
            ))
        start, token = scanned
        if token == OPEN:
            depth += 1
        elif token == CLOSE:
            if depth == 0:
                return start
            depth -= 1
