from pathlib import Path
from bisaya.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_8_fizzbuzz(capsys):
    with open(EXAMPLES / 'program_8.bpp', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        '1', '2', 'Fizz', '4', 'Buzz', 'Fizz', '7', '8', 'Fizz', 'Buzz',
        '11', 'Fizz', '13', '14', 'FizzBuzz',
    ]


def test_program_8_grammar_front_end(capsys):
    with open(EXAMPLES / 'program_8.bpp', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source, front_end='grammar')
    Interpreter().run(ast)
    lines = capsys.readouterr().out.splitlines()
    assert lines[-1] == 'FizzBuzz'
    assert len(lines) == 15
