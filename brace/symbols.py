"""Symbol table construction.

Before anything runs, every source is scanned once from the start to
record where each function body begins. Only top-level definitions of
the form `name { body }` are recognised; bodies are skipped as opaque
groups, so their contents are not checked here beyond brace balance.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

from .errors import ScanError
from .scanner import CLOSE, OPEN, is_reserved, scan_token, skip_group
from .sources import Source, SourceSet
from .types import ErrorVal, SourceAddress


def decode_name(token: bytes) -> str:
    return token.decode('utf-8', 'surrogateescape')


def _scan_source(index: int, source: Source, table: Dict[str, SourceAddress],
                 origins: Dict[str, str]) -> None:
    stream = source.stream
    stream.seek(0)
    in_definition = False
    pending = ''
    while True:
        scanned = scan_token(stream)
        if scanned is None:
            break
        offset, token = scanned
        if token == OPEN:
            if not in_definition:
                raise ScanError(ErrorVal(
                    'UnnamedTopLevelGroup',
                    f"group without a function name at offset {offset} in {source.name}",
                ))
            skip_group(stream, source.name)
            in_definition = False
        elif token == CLOSE:
            raise ScanError(ErrorVal(
                'UnopenedGroup',
                f"'}}' without a matching '{{' at offset {offset} in {source.name}",
            ))
        elif is_reserved(token):
            raise ScanError(ErrorVal(
                'InvalidTopLevelToken',
                f"{token.decode('ascii')!r} outside of a function body at offset {offset} in {source.name}",
            ))
        else:
            name = decode_name(token)
            if in_definition:
                raise ScanError(ErrorVal(
                    'FunctionWithoutGroup',
                    f"function {pending} at {source.name} has no body (followed by {name})",
                ))
            if name in table:
                raise ScanError(ErrorVal(
                    'DuplicateFunctionName',
                    f"function {name} at offset {offset} in {source.name} "
                    f"is already defined in {origins[name]}",
                ))
            table[name] = SourceAddress(index, stream.tell())
            origins[name] = source.name
            pending = name
            in_definition = True
    if in_definition:
        raise ScanError(ErrorVal(
            'FunctionWithoutGroup',
            f"function {pending} at end of {source.name} has no body",
        ))


def build_symbol_table(sources: SourceSet) -> Mapping[str, SourceAddress]:
    """Scan all sources in order and map function names to body addresses.

    Each address points just past the function's name, where its opening
    `{` is read first. Names must be unique across all sources. The
    returned mapping is read-only.
    """
    table: Dict[str, SourceAddress] = {}
    origins: Dict[str, str] = {}
    for index, source in enumerate(sources):
        _scan_source(index, source, table, origins)
    return MappingProxyType(table)
