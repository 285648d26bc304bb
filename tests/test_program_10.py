from pathlib import Path
from bisaya.errors import ErrorKind
from bisaya.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_10_division_by_zero_stops_the_run(capsys):
    with open(EXAMPLES / 'program_10.bpp', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_program(source)
    out = capsys.readouterr().out
    # Output before the failing statement is kept; nothing after it runs
    assert out == 'before\n'
    assert not result.ok
    [err] = result.errors
    assert err.kind is ErrorKind.RUNTIME
    assert err.message == 'Division by zero.'
    assert err.line == 4
