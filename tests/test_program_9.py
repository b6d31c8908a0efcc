from pathlib import Path

from brace.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_9_debug_output(capsys):
    with open(EXAMPLES / 'program_9.brc', 'r', encoding='utf-8') as f:
        source = f.read()
    assert run_program(source, debug=True) == 2
    err = capsys.readouterr().err.strip().split('\n')
    assert err == ['1', '2', 'show main']


def test_program_9_debug_disabled(capsys):
    with open(EXAMPLES / 'program_9.brc', 'r', encoding='utf-8') as f:
        source = f.read()
    assert run_program(source) == 2
    captured = capsys.readouterr()
    assert captured.out == ''
    assert captured.err == ''
