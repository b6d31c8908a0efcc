from pathlib import Path

from brace.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_1_identity():
    with open(EXAMPLES / 'program_1.brc', 'r', encoding='utf-8') as f:
        source = f.read()
    assert run_program(source, register=5) == 5
    assert run_program(source) == 0
