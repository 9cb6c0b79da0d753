import pytest

from ember.ast import Assign, Binary, Block, Call, ExpressionStatement, Literal, While
from ember.errors import DiagnosticKind, Diagnostics
from ember.interpreter import parse_program
from ember.printer import format_expr, format_program, format_stmt


def parse_ok(source):
    diagnostics = Diagnostics()
    statements = parse_program(source, diagnostics)
    assert not diagnostics, [str(d) for d in diagnostics]
    return statements


def parse_expr(source):
    stmt = parse_ok(source + ';')[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expr


def parse_with_errors(source):
    diagnostics = Diagnostics()
    statements = parse_program(source, diagnostics)
    return statements, [d.message for d in diagnostics]


def test_multiplication_binds_tighter_than_addition():
    expr = parse_expr('1 + 2 * 3')
    assert isinstance(expr, Binary)
    assert expr.op.lexeme == '+'
    assert expr.left == Literal(1.0)
    assert isinstance(expr.right, Binary)
    assert expr.right.op.lexeme == '*'
    assert format_expr(expr) == '(+ 1 (* 2 3))'


def test_precedence_ladder():
    assert format_expr(parse_expr('a or b and c == d < e - f / -g')) == \
        '(or a (and b (== c (< d (- e (/ f (- g)))))))'


def test_binary_operators_are_left_associative():
    assert format_expr(parse_expr('1 - 2 - 3')) == '(- (- 1 2) 3)'
    assert format_expr(parse_expr('8 / 4 / 2')) == '(/ (/ 8 4) 2)'


def test_assignment_is_right_associative():
    expr = parse_expr('a = b = 3')
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == 'a'
    assert isinstance(expr.value, Assign)
    assert format_expr(expr) == '(= a (= b 3))'


def test_grouping_overrides_precedence():
    assert format_expr(parse_expr('(1 + 2) * 3')) == '(* (group (+ 1 2)) 3)'


def test_unary_operators_nest():
    assert format_expr(parse_expr('!!true')) == '(! (! true))'
    assert format_expr(parse_expr('--1')) == '(- (- 1))'


def test_call_chains():
    expr = parse_expr('f(1)(2, 3)()')
    assert isinstance(expr, Call)
    assert expr.args == ()
    assert format_expr(expr) == '(call (call (call f 1) 2 3))'


def test_literals():
    assert format_expr(parse_expr('null')) == 'null'
    assert format_expr(parse_expr('"hi"')) == '"hi"'
    assert format_expr(parse_expr('false')) == 'false'


def test_statements():
    program = parse_ok(
        'var a;\n'
        'var b = 1;\n'
        'print a;\n'
        'if (a) print 1; else print 2;\n'
        'while (false) {}\n'
        'fun add(x, y) { return x + y; }\n'
    )
    assert format_program(program).splitlines() == [
        '(var a)',
        '(var b 1)',
        '(print a)',
        '(if a (print 1) (print 2))',
        '(while false (block))',
        '(fun add (x y) (return (+ x y)))',
    ]


def test_for_loop_is_desugared_into_while():
    stmt = parse_ok('for (var i = 0; i < 3; i = i + 1) print i;')[0]
    assert isinstance(stmt, Block)
    assert isinstance(stmt.body[1], While)
    assert format_stmt(stmt) == \
        '(block (var i 0) (while (< i 3) (block (print i) (; (= i (+ i 1))))))'


def test_for_loop_without_clauses():
    stmt = parse_ok('for (;;) print 1;')[0]
    assert isinstance(stmt, Block)
    loop = stmt.body[0]
    assert isinstance(loop, While)
    assert loop.condition == Literal(True)
    assert format_stmt(stmt) == '(block (while true (print 1)))'


def test_for_loop_with_expression_initializer():
    stmt = parse_ok('for (i = 0; i < 1;) print i;')[0]
    assert format_stmt(stmt) == '(block (; (= i 0)) (while (< i 1) (print i)))'


def test_nodes_are_immutable():
    expr = parse_expr('1 + 2')
    with pytest.raises(AttributeError):
        expr.left = Literal(5.0)


def test_missing_semicolon_recovers_at_next_statement():
    statements, messages = parse_with_errors('print 1\nprint 2;\nprint 3;')
    assert messages == ["Error at 'print': Expect ';' after value."]
    # the failed statement is reported as None and the rest still parse
    assert statements[0] is None
    assert [format_stmt(s) for s in statements[1:]] == ['(print 3)']


def test_recovery_stops_before_statement_keywords():
    statements, messages = parse_with_errors('var = 1 + if (true) print 1;\nprint 2;')
    assert messages == ["Error at '=': Expect variable name."]
    assert statements[0] is None
    assert [format_stmt(s) for s in statements[1:]] == ['(if true (print 1))', '(print 2)']


def test_several_bad_statements_each_reported():
    statements, messages = parse_with_errors('var x = ;\nprint (1;\nprint "ok";')
    assert messages == [
        "Error at ';': Expect expression.",
        "Error at ';': Expect ')' after expression.",
    ]
    assert statements[:2] == [None, None]
    assert format_stmt(statements[2]) == '(print "ok")'


def test_bad_statement_inside_block_is_dropped():
    statements, messages = parse_with_errors('{ print ; print 2; }')
    assert messages == ["Error at ';': Expect expression."]
    assert format_stmt(statements[0]) == '(block (print 2))'


def test_invalid_assignment_target_does_not_abort():
    statements, messages = parse_with_errors('1 + 2 = 3;\nprint 4;')
    assert messages == ["Error at '=': Invalid assignment target."]
    assert format_stmt(statements[0]) == '(; (+ 1 2))'
    assert format_stmt(statements[1]) == '(print 4)'


def test_error_at_end_of_input():
    statements, messages = parse_with_errors('print 1')
    assert messages == ["Error at end: Expect ';' after value."]
    assert statements == [None]


def test_unclosed_block():
    statements, messages = parse_with_errors('{ print 1;')
    assert messages == ["Error at end: Expect '}' after block."]


def test_too_many_arguments_is_reported_but_parses():
    args = ', '.join(['1'] * 256)
    statements, messages = parse_with_errors(f'f({args});')
    assert messages == ["Error at '1': Can't have more than 255 arguments."]
    call = statements[0].expr
    assert isinstance(call, Call)
    assert len(call.args) == 256


def test_too_many_parameters_is_reported_but_parses():
    params = ', '.join(f'p{i}' for i in range(256))
    statements, messages = parse_with_errors(f'fun f({params}) {{}}')
    assert messages == ["Error at 'p255': Can't have more than 255 parameters."]
    assert len(statements[0].params) == 256


def test_return_at_top_level_is_reported():
    statements, messages = parse_with_errors('return 1;')
    assert messages == ["Error at 'return': Can't return from top-level code."]
    assert format_stmt(statements[0]) == '(return 1)'


def test_syntax_diagnostics_carry_positions():
    diagnostics = Diagnostics()
    parse_program('print 1;\nvar 2;', diagnostics)
    diag = diagnostics.items[0]
    assert diag.kind is DiagnosticKind.SYNTAX
    assert (diag.line, diag.column) == (2, 5)
