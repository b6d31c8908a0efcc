"""CLI entry point for the Brace interpreter.

Usage:
    python -m brace [-v|-vv|-vvv] [-d] [-e NAME] [-r N] <program> [<program> ...]

Options:
  -v            Increase trace verbosity (can be repeated)
  -d, --debug   Enable the `!` and `@` debug commands (written to stderr)
  -e, --entry   Name of the function to run (default: main)
  -r, --register
                Initial register value, a non-negative integer (default: 0)

All program files are merged into one set of functions, so function
names must be unique across them. `-` reads a program from stdin.

The final register is printed on stdout, or `-` when the computation
failed with no remaining backtrack point. Trace information is written
to `debug.txt` in the current directory when verbosity is greater than
zero.
"""

import argparse
import re
import sys

from .errors import BraceError
from .interpreter import Interpreter
from .sources import SourceSet


def register_value(text: str) -> int:
    if not re.fullmatch(r'[0-9]+', text):
        raise argparse.ArgumentTypeError(f'{text!r} is not a non-negative integer')
    return int(text, 10)


def format_result(result) -> str:
    return '-' if result is None else str(result)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='brace', description="Brace language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase trace verbosity (can be repeated)')
    parser.add_argument('-d', '--debug', action='store_true', help='enable the ! and @ debug commands')
    parser.add_argument('-e', '--entry', default='main', metavar='NAME', help='function to run (default: main)')
    parser.add_argument('-r', '--register', type=register_value, default=0, metavar='N',
                        help='initial register value (default: 0)')
    parser.add_argument('programs', nargs='+', metavar='program', help='Brace program file(s); - for stdin')
    if hasattr(sys, 'set_int_max_str_digits'):
        # registers are unbounded, so is their decimal form
        sys.set_int_max_str_digits(0)
    args = parser.parse_args(argv)

    with SourceSet() as sources:
        try:
            for path in args.programs:
                sources.open_file(path)
            interpreter = Interpreter(sources, debug=args.debug, debug_level=args.v)
            result = interpreter.run(args.entry, args.register)
        except BraceError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    print(format_result(result))


if __name__ == '__main__':
    main()
