from pathlib import Path

from brace.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_6_double():
    with open(EXAMPLES / 'program_6.brc', 'r', encoding='utf-8') as f:
        source = f.read()
    assert run_program(source, register=0) == 0
    assert run_program(source, register=4) == 8
    # Deep recursion lives on the interpreter's own stacks.
    assert run_program(source, register=3000) == 6000
