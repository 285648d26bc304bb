import builtins
import io
import pytest
from bisaya.errors import BisayaRuntimeError, ErrorKind
from bisaya.interpreter import Interpreter, parse_program, run_program
from bisaya.values import CharVal, NIL, is_truthy, to_string


def run(body, **kwargs):
    interp = Interpreter(**kwargs)
    interp.run(parse_program(f"SUGOD\n{body}\nKATAPUSAN"))
    return interp


def output_of(body):
    out = io.StringIO()
    run(body, output=out)
    return out.getvalue()


def test_to_string_drops_trailing_zero():
    assert to_string(5.0) == '5'
    assert to_string(3.14) == '3.14'
    assert to_string(-60.0) == '-60'
    assert to_string(CharVal('z')) == 'z'
    assert to_string(NIL) == 'nil'


def test_truthiness():
    assert is_truthy('OO')
    assert not is_truthy('DILI')
    assert not is_truthy('anything else')
    assert is_truthy(2.0)
    assert not is_truthy(0.0)
    assert is_truthy(CharVal('a'))
    assert not is_truthy(NIL)


def test_declaration_defaults():
    interp = run('MUGNA NUMERO x\nMUGNA TINUOD t\nMUGNA LETRA c\nMUGNA TIPIK d')
    values = interp.environment.values
    assert values['x'] == 0.0
    assert values['t'] == 'DILI'
    assert values['c'] == ''
    assert values['d'] == 0.0


def test_concat_mixes_kinds():
    assert output_of("IPAKITA: 1 & 'a' & \"b\"") == '1ab'


def test_newline_and_hash():
    assert output_of('IPAKITA: "a" & $ & [#] & "b"') == 'a\n#b'


def test_print_adds_no_newline():
    assert output_of('IPAKITA: 1\nIPAKITA: 2') == '12'


def test_plus_with_text_concatenates():
    assert output_of('IPAKITA: "n=" + 5') == 'n=5'


def test_arithmetic():
    assert output_of('IPAKITA: 7 / 2 & " " & 7 % 3 & " " & -7 % 3 & " " & 2 * (3 + 4)') == '3.5 1 -1 14'


def test_comparison_and_equality_give_logical_text():
    assert output_of('IPAKITA: (1 < 2) & (2 <= 1) & (3 == 3) & (3 <> 3)') == 'OODILIOODILI'


def test_different_kinds_are_not_equal():
    assert output_of('IPAKITA: (5 == "5") & (\'a\' == \'a\') & (\'a\' == "a")') == 'DILIOODILI'


def test_dili_negates():
    assert output_of('MUGNA TINUOD t = "OO"\nIPAKITA: DILI t & DILI (1 > 2)') == 'DILIOO'


def test_logical_operators_do_not_short_circuit():
    interp = run(
        'MUGNA NUMERO a = 0, b = 0\n'
        'MUGNA TINUOD r\n'
        'r = (1 > 2) UG ((a = 1) == 1)\n'
        'r = (1 < 2) O ((b = 1) == 1)'
    )
    values = interp.environment.values
    assert values['a'] == 1.0
    assert values['b'] == 1.0
    assert values['r'] == 'OO'


def test_for_loop_prints_123():
    assert output_of('MUGNA NUMERO i\nALANG SA (i=1, i<=3, i++) PUNDOK { IPAKITA: i }') == '123'


def test_for_loop_with_false_condition_runs_body_zero_times():
    interp = run('MUGNA NUMERO i\nALANG SA (i=5, i<3, i++) PUNDOK { IPAKITA: i }')
    assert interp.environment.values['i'] == 5.0


def test_if_uses_truthiness_of_numbers():
    assert output_of('KUNG (0) IPAKITA: "yes" KUNG WALA IPAKITA: "no"') == 'no'


def test_nested_if_binds_else_to_inner():
    assert output_of('KUNG (1) KUNG (0) IPAKITA: "a" KUNG WALA IPAKITA: "b"') == 'b'


def test_flat_scope():
    assert output_of('PUNDOK { MUGNA NUMERO hidden = 3 }\nIPAKITA: hidden') == '3'


def test_assignment_creates_undeclared_name():
    interp = run('fresh = "x"')
    assert interp.environment.values['fresh'] == 'x'


def test_input_with_declared_types(monkeypatch):
    monkeypatch.setattr(builtins, 'input', lambda prompt='': '5,10')
    interp = run('MUGNA NUMERO x, y\nDAWAT: x, y')
    assert interp.environment.values['x'] == 5.0
    assert interp.environment.values['y'] == 10.0


def test_input_trims_fields_and_keeps_raw_text_for_untyped():
    interp = run('MUGNA TIPIK d\nMUGNA LETRA c\nDAWAT: d, c, raw', read_line=lambda: ' 2.5 ,q,  hello ')
    values = interp.environment.values
    assert values['d'] == 2.5
    assert values['c'] == CharVal('q')
    assert values['raw'] == 'hello'


def test_input_eof_reads_empty_line(monkeypatch):
    def eof(prompt=''):
        raise EOFError
    monkeypatch.setattr(builtins, 'input', eof)
    interp = run('DAWAT: s')
    assert interp.environment.values['s'] == ''


def test_input_wrong_field_count(monkeypatch):
    monkeypatch.setattr(builtins, 'input', lambda prompt='': '5')
    with pytest.raises(BisayaRuntimeError) as excinfo:
        run('MUGNA NUMERO x, y\nDAWAT: x, y')
    assert excinfo.value.err.message == 'Expected 2 values, got 1.'
    assert excinfo.value.err.line == 3


@pytest.mark.parametrize('decl, line', [
    ('MUGNA NUMERO n', 'abc'),
    ('MUGNA LETRA n', 'ab'),
    ('MUGNA TINUOD n', 'maybe'),
])
def test_input_that_does_not_fit_the_type(decl, line):
    with pytest.raises(BisayaRuntimeError) as excinfo:
        run(f'{decl}\nDAWAT: n', read_line=lambda: line)
    assert excinfo.value.err.message.startswith("Invalid input for 'n'")


@pytest.mark.parametrize('expr, message', [
    ('1 / 0', 'Division by zero.'),
    ('1 % 0', 'Modulo by zero.'),
    ('-"a"', 'Operand must be a number.'),
    ('"a" * 2', 'Operands must be numbers (got Text and Number).'),
    ("'a' + 1", 'Operands must be two numbers or two strings.'),
    ('"a" < 1', 'Operands must be numbers (got Text and Number).'),
    ('missing', "Undefined variable 'missing'."),
])
def test_runtime_errors(expr, message):
    with pytest.raises(BisayaRuntimeError) as excinfo:
        run(f'IPAKITA: {expr}')
    err = excinfo.value.err
    assert err.kind is ErrorKind.RUNTIME
    assert err.message == message
    assert err.line == 2


def test_run_program_collects_errors():
    result = run_program('SUGOD\nIPAKITA: x\nKATAPUSAN', output=io.StringIO())
    assert not result.ok
    assert str(result.errors[0]) == "[Runtime error] line 2: Undefined variable 'x'."


def test_run_program_lex_error():
    result = run_program('SUGOD\n@\nKATAPUSAN')
    [err] = result.errors
    assert err.kind is ErrorKind.LEXICAL
    assert err.line == 2


def test_run_program_success(capsys):
    result = run_program('SUGOD IPAKITA: "ok" KATAPUSAN', front_end='grammar')
    assert result.ok
    assert result.errors == []
    assert capsys.readouterr().out == 'ok'


def test_unknown_front_end():
    with pytest.raises(ValueError):
        parse_program('SUGOD KATAPUSAN', front_end='yacc')


def test_debug_file_levels(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    out = io.StringIO()
    interp = Interpreter(output=out, debug_level=3, debug_file=str(debug_file))
    interp.run(parse_program('SUGOD\nMUGNA NUMERO x = 1\nKUNG (x == 1) IPAKITA: x\nKATAPUSAN'))
    text = debug_file.read_text(encoding='utf-8')
    assert 'execute VarDecl' in text
    assert 'declare x: NUMERO = 1.0' in text
    assert "if condition 'OO' -> True" in text
    assert out.getvalue() == '1'


def test_to_string_large_and_tiny_numbers():
    assert to_string(1e16) == '1.0E16'
    assert to_string(2.5e20) == '2.5E20'
    assert to_string(1.5e-05) == '1.5E-5'
    assert to_string(123456789.0) == '123456789'


@pytest.mark.parametrize('line', ['1_000', 'nan', 'inf', '-Infinity'])
def test_numeric_input_rejects_underscores_and_non_finite(line):
    with pytest.raises(BisayaRuntimeError) as excinfo:
        run('MUGNA NUMERO n\nDAWAT: n', read_line=lambda: line)
    assert excinfo.value.err.message.startswith("Invalid input for 'n'")


def test_letra_input_takes_any_single_character():
    interp = run('MUGNA LETRA a, b\nDAWAT: a, b', read_line=lambda: '5,#')
    assert interp.environment.values['a'] == CharVal('5')
    assert interp.environment.values['b'] == CharVal('#')


def test_second_run_keeps_trace_out_of_program_output(tmp_path, capsys):
    debug_file = tmp_path / 'debug.txt'
    out = io.StringIO()
    interp = Interpreter(output=out, debug_level=1, debug_file=str(debug_file))
    program = parse_program('SUGOD IPAKITA: "x" KATAPUSAN')
    interp.run(program)
    interp.run(program)
    assert capsys.readouterr().out == ''
    assert out.getvalue() == 'xx'
    assert debug_file.read_text(encoding='utf-8').count('execute Print') == 2
