from pathlib import Path
from bisaya.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_12_decimals(capsys):
    with open(EXAMPLES / 'program_12.bpp', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out
    assert out == 'total: 50\nhalf: 6.25'
