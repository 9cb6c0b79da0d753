from pathlib import Path

from ember.interpreter import Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def run_example(name):
    with open(EXAMPLES / name, 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    result = interp.run_source(source)
    assert result.ok, [str(d) for d in result.diagnostics]


def test_hello(capsys):
    run_example('hello.ember')
    out = capsys.readouterr().out.strip()
    assert out == 'Hello, World!'


def test_fibonacci(capsys):
    run_example('fibonacci.ember')
    out = capsys.readouterr().out.strip()
    assert out.splitlines() == ['0', '1', '1', '2', '3', '5', '8', '13', '21', '34']


def test_counter(capsys):
    run_example('counter.ember')
    out = capsys.readouterr().out.strip()
    assert out.splitlines() == ['3', '2']


def test_scopes(capsys):
    run_example('scopes.ember')
    out = capsys.readouterr().out.strip()
    assert out.splitlines() == [
        'inner a', 'outer b', 'global c',
        'outer a', 'outer b', 'global c',
        'global a', 'global b', 'global c',
    ]


def test_natives(capsys):
    run_example('natives.ember')
    out = capsys.readouterr().out
    assert out == 'no newline, then a newline\ntrue\n1.5\n'
