import io

import pytest

from nscript.ast import Node, NodeKind
from nscript.environment import Environment
from nscript.errors import NotImplementedCallError, NScriptError, Position
from nscript.interpreter import Evaluator, evaluate_source, run_program
from nscript.parser import parse_program


def error_of(source, env=None, **options):
    with pytest.raises(NScriptError) as exc:
        evaluate_source(source, env, **options)
    return exc.value


def test_precedence_and_grouping():
    assert run_program("2 + 3 * 4").value == 14.0
    assert run_program("(2 + 3) * 4").value == 20.0
    assert run_program("10 - 4 - 3").value == 3.0
    assert run_program("10 / 4").value == 2.5


def test_result_spans_the_evaluated_expression():
    result = run_program("1 + 2")
    assert result.kind == NodeKind.NUM
    assert result.pos == Position(0, 5)


def test_string_concatenation():
    result = run_program("'foo' + 'bar'")
    assert result.kind == NodeKind.STRING
    assert result.value == 'foobar'


def test_string_supports_only_plus():
    err = error_of("'a' - 'b'")
    assert err.name == 'TypeError'
    assert err.message == 'string does not support bin `-`'
    assert err.pos == Position(4, 5)


def test_mismatched_operand_types():
    err = error_of("1 + 'x'")
    assert err.name == 'TypeError'
    assert err.message == 'unknown bin `+` between different types (`num` and `string`)'


def test_none_does_not_support_binary_operators():
    assert error_of("none + none").message == 'type `none` does not support bin'


def test_division_by_zero():
    err = error_of("5 / 0")
    assert err.name == 'ArithmeticError'
    assert err.message == 'dividing by 0'
    assert err.pos == Position(4, 5)


def test_variables_persist_in_a_shared_environment():
    env = Environment()
    assert evaluate_source("x = 5", env).kind == NodeKind.NONE
    assert evaluate_source("x + 1", env).value == 6.0


def test_unknown_variable():
    err = error_of("y")
    assert err.name == 'NameError'
    assert err.message == 'unknown variable'
    assert err.pos == Position(0, 1)


def test_reassignment_overwrites_in_place():
    env = Environment()
    evaluate_source("x = 5 z = 1", env)
    evaluate_source("x = 6", env)
    assert env.names() == ['x', 'z']
    assert len(env) == 2
    assert env.lookup('x').value == 6.0
    assert [(name, value.to_string()) for name, value in env.items()] == [('x', '6'), ('z', '1')]


def test_chained_assignment_binds_none_to_outer_name():
    env = Environment()
    evaluate_source("a = b = 5", env)
    assert env.lookup('b').value == 5.0
    assert env.lookup('a').kind == NodeKind.NONE


def test_program_returns_last_value():
    assert run_program("x = 2 x * 10").value == 20.0
    assert run_program("").kind == NodeKind.NONE


def test_unary():
    assert run_program("-5").value == -5.0
    assert run_program("+5").value == 5.0
    assert run_program("--5").value == 5.0
    assert run_program("-(2 * 3)").value == -6.0


def test_unary_on_string():
    err = error_of("-'a'")
    assert err.name == 'TypeError'
    assert err.message == 'type `string` does not support unary `-`'
    assert err.pos == Position(1, 4)


def test_both_operands_evaluate_before_the_operator_is_checked():
    env = Environment()
    with pytest.raises(NScriptError):
        evaluate_source("(x = 3) * (y = 4)", env)
    assert 'x' in env and 'y' in env


def test_floor():
    result = run_program("floor(3.7)")
    assert result.kind == NodeKind.NUM
    assert result.value == 3.0
    assert run_program("floor(-3.7)").value == -3.0
    assert run_program("x = 9.99 floor(x) + 1").value == 10.0


def test_floor_arity():
    err = error_of("floor(1, 2)")
    assert err.name == 'ArityError'
    assert err.message == 'expected args 1 (found 2)'
    assert err.pos == Position(0, 5)
    assert error_of("floor()").message == 'expected args 1 (found 0)'


def test_floor_requires_a_number():
    err = error_of("floor('a')")
    assert err.name == 'TypeError'
    assert err.message == 'expected a value with type `num` (found `string`)'
    assert err.pos == Position(6, 9)


def test_floor_rejects_non_finite_numbers():
    huge = '9' * 400  # overflows to inf
    err = error_of(f"floor({huge})")
    assert err.name == 'TypeError'
    assert err.message == 'cannot floor `inf`'
    assert err.pos == Position(6, 406)


def test_print_keeps_every_digit(capsys):
    run_program("print(0.0000001, 3.14159265)")
    assert capsys.readouterr().out == '0.00000013.14159265'


def test_print_echoes_arguments_as_written(capsys):
    result = run_program("print('hi', 1 + 2, undefined_name)")
    assert result.kind == NodeKind.NONE
    assert capsys.readouterr().out == "'hi'1 + 2undefined_name"


def test_print_writes_to_the_configured_sink():
    out = io.StringIO()
    evaluate_source("print(1.50) print(none)", output=out)
    assert out.getvalue() == '1.5none'


def test_unknown_builtin():
    err = error_of("open('f')")
    assert err.name == 'NameError'
    assert err.message == 'unknown builtin function'
    assert err.pos == Position(0, 4)


def test_process_call_without_hook_is_not_implemented():
    with pytest.raises(NotImplementedCallError) as exc:
        run_program("'ls'('-l')")
    assert exc.value.name == 'NotImplementedError'
    assert exc.value.pos == Position(0, 10)


def test_process_call_uses_host_hook():
    calls = []

    def hook(name, args, pos):
        calls.append((name, args))
        return Node(NodeKind.NUM, float(len(args)), pos)

    result = evaluate_source("'count'(1 + 1, 'x')", process_hook=hook)
    assert result.value == 2.0
    name, args = calls[0]
    assert name == 'count'
    assert [a.value for a in args] == [2.0, 'x']


def test_results_render_as_source_text():
    assert run_program("1 / 4").to_string() == '0.25'
    assert run_program("'it' + '\\'s'").to_string() == "'it\\'s'"


def test_debug_log(tmp_path):
    log = tmp_path / 'debug.txt'
    evaluator = Evaluator(debug_level=2, debug_file=str(log))
    evaluator.run(parse_program("x = 5 floor(x)"))
    evaluator.close()
    text = log.read_text(encoding='utf-8')
    assert 'evaluate x = 5' in text
    assert 'assign x = 5' in text
    assert 'call <builtin floor> with 1 args' in text
    # node visits are only logged from level 3
    assert 'visit' not in text


def test_debug_without_file_goes_to_stderr(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    evaluator = Evaluator(debug_level=1, debug_file=None)
    evaluator.run(parse_program("1 + 1"))
    evaluator.close()
    assert 'evaluate 1 + 1' in capsys.readouterr().err
    assert not (tmp_path / 'debug.txt').exists()


def test_no_debug_file_without_verbosity(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run_program("1 + 1")
    assert not (tmp_path / 'debug.txt').exists()
