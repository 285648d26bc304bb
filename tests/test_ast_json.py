import json
from pathlib import Path
from bisaya.ast_json import ast_to_obj, ast_from_obj
from bisaya.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_object_shape():
    program = parse_program("SUGOD\nMUGNA LETRA c = 'x'\nIPAKITA: c & $\nKATAPUSAN")
    obj = ast_to_obj(program)
    assert obj['type'] == 'Program'
    assert obj['variable_types'] == {'c': 'LETRA'}
    decl, show = obj['body']
    assert decl == {
        'type': 'VarDecl',
        'name': {'kind': 'IDENTIFIER', 'lexeme': 'c', 'line': 2},
        'declared_type': 'LETRA',
        'initializer': {'type': 'Literal', 'value': {'__type__': 'Char', 'value': 'x'}},
    }
    assert show['type'] == 'Print'
    assert show['expressions'][1] == {'type': 'Literal', 'value': '\n'}


def test_json_round_trip_runs_the_same(capsys):
    with open(EXAMPLES / 'program_8.bpp', 'r', encoding='utf-8') as f:
        program = parse_program(f.read())
    data = json.loads(json.dumps(ast_to_obj(program)))
    restored = ast_from_obj(data)
    assert restored == program
    Interpreter().run(restored)
    assert capsys.readouterr().out.splitlines()[-1] == 'FizzBuzz'
