import pytest

from ember.__main__ import EX_DATAERR, EX_SOFTWARE, main


def write_program(tmp_path, source):
    path = tmp_path / 'program.ember'
    path.write_text(source, encoding='utf-8')
    return str(path)


def run_main(argv):
    with pytest.raises(SystemExit) as info:
        main(argv)
    return info.value.code


def test_runs_program(tmp_path, capsys):
    path = write_program(tmp_path, 'var x = 2;\nprint x * 21;\n')
    assert run_main([path]) == 0
    assert capsys.readouterr().out == '42\n'


def test_runtime_error_exit_status(tmp_path, capsys):
    path = write_program(tmp_path, 'print 1;\nprint 1 / 0;\nprint 3;\n')
    assert run_main([path]) == EX_SOFTWARE
    captured = capsys.readouterr()
    assert captured.out == '1\n'
    assert captured.err.strip() == '[line 2] RuntimeError: Division by zero.'


def test_syntax_error_exit_status(tmp_path, capsys):
    path = write_program(tmp_path, 'print 1;\nprint (2;\n')
    assert run_main([path]) == EX_DATAERR
    captured = capsys.readouterr()
    # nothing runs when the program has static errors
    assert captured.out == ''
    assert "Expect ')' after expression." in captured.err


def test_lexical_error_reports_column(tmp_path, capsys):
    path = write_program(tmp_path, 'print 1 $ 2;\n')
    assert run_main([path]) == EX_DATAERR
    err = capsys.readouterr().err
    assert "[line 1, column 9] LexicalError: Unexpected character '$'." in err


def test_tokens_dump(tmp_path, capsys):
    path = write_program(tmp_path, 'print 1;')
    assert run_main(['--tokens', path]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith('PRINT print')
    assert lines[-1].startswith('EOF')


def test_ast_dump(tmp_path, capsys):
    path = write_program(tmp_path, 'var a = 1 + 2;\nprint a;')
    assert run_main(['--ast', path]) == 0
    assert capsys.readouterr().out.splitlines() == ['(var a (+ 1 2))', '(print a)']


def test_missing_file(tmp_path, capsys):
    assert run_main([str(tmp_path / 'nope.ember')]) == 1
    assert 'not found' in capsys.readouterr().err


def test_debug_file(tmp_path, capsys):
    path = write_program(tmp_path, 'var a = 1;\nprint a;')
    trace = tmp_path / 'trace.txt'
    assert run_main(['-vv', '--debug-file', str(trace), path]) == 0
    assert capsys.readouterr().out == '1\n'
    assert 'declare a = 1' in trace.read_text(encoding='utf-8')


def test_repl_keeps_globals(monkeypatch, capsys):
    lines = iter(['var a = 5;', 'print a;', '.reset', 'print a;', '.exit'])
    monkeypatch.setattr('builtins.input', lambda prompt='': next(lines))
    assert run_main([]) == 0
    captured = capsys.readouterr()
    assert captured.out == '5\n'
    assert "Undefined variable 'a'." in captured.err
