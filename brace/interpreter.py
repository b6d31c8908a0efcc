"""Execution engine for the Brace language.

The interpreter never builds a syntax tree. Its program counter is a
source index plus that source's stream position, and it reads one token
at a time with the scanner. State carried between tokens:

* the register, a single non-negative integer;
* `depth`, the number of groups currently entered;
* the register snapshot stack, one saved register per entered group;
* the call stack of `CallFrame` records;
* the mode, SUCCESS or FAILED.

A `-` on a zero register switches to FAILED mode. While failed, tokens
are skipped (whole nested groups at a time) until a `|` of the current
group restores the register saved when that group was entered, or a `}`
closes the group and lets the failure propagate outwards. The run ends
when the entry function's body closes, yielding the register on success
or None if it closed while failed.
"""

from __future__ import annotations

import sys
from typing import Callable, Dict, Iterable, List, Mapping, Optional, TextIO

from .errors import ExecutionError
from .scanner import ALTERNATIVE, CLOSE, OPEN, next_token, skip_group
from .sources import SourceSet
from .symbols import build_symbol_table, decode_name
from .types import CallFrame, ErrorVal, Mode, SourceAddress


class Interpreter:
    """Runs Brace programs held in a `SourceSet`.

    The symbol table is built when the interpreter is created, so
    malformed programs are rejected before anything executes.
    """
    def __init__(self, sources: SourceSet, debug: bool = False, debug_level: int = 0,
                 debug_file: str = 'debug.txt', out: Optional[TextIO] = None):
        self.sources = sources
        self.symbols: Mapping[str, SourceAddress] = build_symbol_table(sources)
        self.debug_enabled = debug
        self.out = out if out is not None else sys.stderr
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[TextIO] = None

        self.register = 0
        self.mode = Mode.SUCCESS
        self.depth = 0
        self.call_stack: List[CallFrame] = []
        self.snapshots: List[int] = []
        self.source_index = 0
        self.finished = False
        self.result: Optional[int] = None

        self.success_ops: Dict[bytes, Callable[[bytes], None]] = {
            b'+': self.op_increment,
            b'-': self.op_decrement,
            OPEN: self.op_open,
            CLOSE: self.op_close,
            ALTERNATIVE: self.op_skip_alternative,
            b'?': self.op_nothing,
            b'!': self.op_print_register,
            b'@': self.op_print_stack,
        }
        self.failed_ops: Dict[bytes, Callable[[bytes], None]] = {
            OPEN: self.op_skip_group,
            CLOSE: self.op_close,
            ALTERNATIVE: self.op_backtrack,
        }

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    @property
    def stream(self):
        return self.sources[self.source_index].stream

    @property
    def source_name(self) -> str:
        return self.sources[self.source_index].name

    def position(self) -> SourceAddress:
        return SourceAddress(self.source_index, self.stream.tell())

    def jump(self, address: SourceAddress):
        self.source_index = address.source
        self.stream.seek(address.offset)

    # Public API
    def run(self, entry: str = 'main', register: int = 0) -> Optional[int]:
        """Run `entry` with the given initial register.

        Returns the final register, or None when the entry function's
        body closes in FAILED mode.
        """
        if register < 0:
            raise ValueError(f'initial register must be non-negative, got {register}')
        if self.debug_level > 0:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        try:
            self.start(entry, register)
            while not self.finished:
                self.step()
            return self.result
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def start(self, entry: str, register: int):
        address = self.symbols.get(entry)
        if address is None:
            raise ExecutionError(ErrorVal('EntryPointNotFound', f'entry point {entry} not found'))
        self.register = register
        self.mode = Mode.SUCCESS
        self.depth = 0
        self.snapshots = []
        self.call_stack = [CallFrame(0, None, entry)]
        self.finished = False
        self.result = None
        self.jump(address)
        self.debug(f"enter {entry} at {address} with register {register}")

    def step(self):
        """Read and execute a single token."""
        token = next_token(self.stream)
        if token is None:
            raise ExecutionError(ErrorVal(
                'UnexpectedReturn',
                f'reached end of {self.source_name} inside {self.call_stack[-1].function_name}',
            ))
        if self.debug_level >= 3:
            self.debug(f"{self.mode.value:7} depth={self.depth} register={self.register} "
                       f"token={decode_name(token)}")
        if self.mode is Mode.SUCCESS:
            self.success_ops.get(token, self.op_call)(token)
        else:
            handler = self.failed_ops.get(token)
            if handler is not None:
                handler(token)

    # Success mode
    def op_increment(self, token: bytes):
        self.register += 1

    def op_decrement(self, token: bytes):
        if self.register == 0:
            self.mode = Mode.FAILED
            if self.debug_level >= 2:
                self.debug(f"fail in {self.call_stack[-1].function_name} at depth {self.depth}")
        else:
            self.register -= 1

    def op_open(self, token: bytes):
        self.snapshots.append(self.register)
        self.depth += 1

    def op_skip_alternative(self, token: bytes):
        # land on the group's `}` so it is closed by op_close
        close_at = skip_group(self.stream, self.source_name)
        self.stream.seek(close_at)
        if self.debug_level >= 2:
            self.debug(f"skip alternative to {self.source_index}:{close_at}")

    def op_nothing(self, token: bytes):
        pass

    def op_print_register(self, token: bytes):
        if self.debug_enabled:
            print(self.register, file=self.out)

    def op_print_stack(self, token: bytes):
        if self.debug_enabled:
            print(' '.join(frame.function_name for frame in reversed(self.call_stack)), file=self.out)

    def op_call(self, token: bytes):
        name = decode_name(token)
        return_address = self.position()
        address = self.symbols.get(name)
        if address is None:
            raise ExecutionError(ErrorVal(
                'UndefinedFunctionCall',
                f'call to undefined function {name} at offset {return_address.offset} in {self.source_name}',
            ))
        self.call_stack.append(CallFrame(self.depth, return_address, name))
        if self.debug_level >= 1:
            self.debug(f"call {name} at depth {self.depth}, return to {return_address}")
        self.jump(address)

    # Failed mode
    def op_skip_group(self, token: bytes):
        skip_group(self.stream, self.source_name)

    def op_backtrack(self, token: bytes):
        self.register = self.snapshots[-1]
        self.mode = Mode.SUCCESS
        if self.debug_level >= 2:
            self.debug(f"backtrack at depth {self.depth}, register restored to {self.register}")

    # Shared by both modes
    def op_close(self, token: bytes):
        if not self.snapshots or not self.call_stack:
            raise ExecutionError(ErrorVal(
                'UnexpectedReturn',
                f'group closed with nothing open at offset {self.stream.tell()} in {self.source_name}',
            ))
        self.depth -= 1
        self.snapshots.pop()
        if self.depth != self.call_stack[-1].depth_at_call:
            return
        frame = self.call_stack.pop()
        if frame.is_entry:
            self.finished = True
            self.result = self.register if self.mode is Mode.SUCCESS else None
            self.debug(f"exit {frame.function_name}: "
                       f"{self.result if self.result is not None else 'no value'}")
            return
        if self.debug_level >= 1:
            self.debug(f"return from {frame.function_name} ({self.mode.value}) to {frame.return_address}")
        self.jump(frame.return_address)


def run_program(source: str, entry: str = 'main', register: int = 0, debug: bool = False,
                debug_level: int = 0) -> Optional[int]:
    """Convenience function to run a Brace program held in a string."""
    with SourceSet() as sources:
        sources.add_text(source)
        interpreter = Interpreter(sources, debug=debug, debug_level=debug_level)
        return interpreter.run(entry, register)


def run_files(paths: Iterable[str], entry: str = 'main', register: int = 0, debug: bool = False,
              debug_level: int = 0) -> Optional[int]:
    """Run the program made of the given files, merged in order."""
    with SourceSet() as sources:
        for path in paths:
            sources.open_file(path)
        interpreter = Interpreter(sources, debug=debug, debug_level=debug_level)
        return interpreter.run(entry, register)
