import builtins
import json

import pytest

from nscript.__main__ import main


def test_eval_prints_final_value(capsys):
    main(['-e', 'x = 2 x * 21'])
    assert capsys.readouterr().out == '42\n'


def test_none_result_prints_nothing(capsys):
    main(['-e', 'x = 2'])
    assert capsys.readouterr().out == ''


def test_runs_program_file(tmp_path, capsys):
    program = tmp_path / 'hello.ns'
    program.write_text("greeting = 'hello'\nprint(greeting)\ngreeting + ' world'\n", encoding='utf-8')
    main([str(program)])
    assert capsys.readouterr().out == "greeting'hello world'\n"


def test_error_exits_with_status_1(capsys):
    with pytest.raises(SystemExit) as exc:
        main(['-e', '1 + missing'])
    assert exc.value.code == 1
    assert capsys.readouterr().err.strip() == 'NameError: unknown variable (at 4..11)'


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / 'nope.ns')])
    assert exc.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_emit_and_run_ast(tmp_path, capsys):
    program = tmp_path / 'calc.ns'
    program.write_text("floor(7 / 2)", encoding='utf-8')
    main(['--emit-ast', str(program)])
    ast_path = tmp_path / 'calc.ns.ast.json'
    assert capsys.readouterr().out.strip() == str(ast_path)
    data = json.loads(ast_path.read_text(encoding='utf-8'))
    assert data['type'] == 'Program'
    main(['--ast', str(ast_path)])
    assert capsys.readouterr().out == '3\n'


def test_verbose_writes_debug_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(['-vv', '-e', 'x = 1'])
    assert 'assign x = 1' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')


def test_repl_shares_variables(monkeypatch, capsys):
    lines = iter(['x = 4', 'print(x)', '', 'x * 2', 'y', 'exit'])
    monkeypatch.setattr(builtins, 'input', lambda prompt='': next(lines))
    main([])
    captured = capsys.readouterr()
    out_lines = captured.out.splitlines()
    assert out_lines[0] == 'NScript REPL'
    assert out_lines[2:] == ['x', '8']
    assert 'NameError: unknown variable' in captured.err


def test_repl_stops_at_end_of_input(monkeypatch, capsys):
    def no_more_input(prompt=''):
        raise EOFError

    monkeypatch.setattr(builtins, 'input', no_more_input)
    main([])
    assert capsys.readouterr().out.startswith('NScript REPL')
