"""Tests for precedence climbing and the recursive-descent productions."""

from conftest import make_parser

from kaleido.errors import ParseError
from kaleido.lexer import CHAR
from kaleido.parser import (
    ANON_EXPR_NAME,
    BinaryOp,
    Call,
    Function,
    NumberLiteral,
    Prototype,
    VariableRef,
)

N = NumberLiteral
V = VariableRef


def parse_expr(source, precedence=None):
    parser = make_parser(source, precedence)
    return parser.parse_expression()


class TestPrecedence:

    def test_product_binds_tighter_than_sum(self):
        assert parse_expr("1+2*3") == BinaryOp('+', N(1.0), BinaryOp('*', N(2.0), N(3.0)))

    def test_product_on_the_left(self):
        assert parse_expr("1*2+3") == BinaryOp('+', BinaryOp('*', N(1.0), N(2.0)), N(3.0))

    def test_equal_precedence_is_left_associative(self):
        assert parse_expr("1-2-3") == BinaryOp('-', BinaryOp('-', N(1.0), N(2.0)), N(3.0))

    def test_parentheses_override_precedence(self):
        assert parse_expr("(1+2)*3") == BinaryOp('*', BinaryOp('+', N(1.0), N(2.0)), N(3.0))

    def test_higher_run_then_lower_operator(self):
        expected = BinaryOp('-', BinaryOp('+', N(1.0), BinaryOp('*', N(2.0), N(3.0))), N(4.0))
        assert parse_expr("1+2*3-4") == expected

    def test_comparison_binds_loosest(self):
        assert parse_expr("a<b+c") == BinaryOp('<', V('a'), BinaryOp('+', V('b'), V('c')))


class TestOperatorTable:

    def test_unregistered_operator_ends_expression(self):
        parser = make_parser("1/2")
        assert parser.parse_expression() == N(1.0)
        assert parser.current.type == CHAR and parser.current.value == '/'

    def test_installed_operator(self):
        parser = make_parser("a/b*c")
        parser.install_operator('/', 40)
        assert parser.parse_expression() == BinaryOp('*', BinaryOp('/', V('a'), V('b')), V('c'))

    def test_non_positive_precedence_is_not_an_operator(self):
        parser = make_parser("a<b")
        parser.install_operator('<', 0)
        assert parser.parse_expression() == V('a')

    def test_custom_table(self):
        # '+' tighter than '*'
        expr = parse_expr("1*2+3", precedence={'+': 50, '*': 10})
        assert expr == BinaryOp('*', N(1.0), BinaryOp('+', N(2.0), N(3.0)))


class TestPrimary:

    def test_variable(self):
        assert parse_expr("x") == V('x')

    def test_call_with_arguments(self):
        assert parse_expr("foo(1, x+2)") == Call('foo', [N(1.0), BinaryOp('+', V('x'), N(2.0))])

    def test_call_without_arguments(self):
        assert parse_expr("foo()") == Call('foo', [])

    def test_nested_call(self):
        assert parse_expr("f(g(1))") == Call('f', [Call('g', [N(1.0)])])

    def test_call_in_expression(self):
        assert parse_expr("2*f(1)") == BinaryOp('*', N(2.0), Call('f', [N(1.0)]))


class TestParseErrors:

    def test_close_paren_first_is_unknown_token(self):
        parser = make_parser(")")
        assert parser.parse_expression() is None
        assert len(parser.errors) == 1
        err = parser.errors[0]
        assert isinstance(err, ParseError)
        assert "unknown token" in err.message
        assert (err.line, err.column) == (1, 1)

    def test_missing_close_paren(self):
        parser = make_parser("(1+2")
        assert parser.parse_expression() is None
        assert parser.errors[0].message == "expected ')'"

    def test_missing_comma_between_arguments(self):
        parser = make_parser("foo(1 2)")
        assert parser.parse_expression() is None
        assert "expected ')' or ','" in parser.errors[0].message

    def test_failed_argument_fails_call(self):
        parser = make_parser("foo(1, ))")
        assert parser.parse_expression() is None
        assert "unknown token" in parser.errors[0].message

    def test_missing_right_operand(self):
        parser = make_parser("1+")
        assert parser.parse_expression() is None
        assert parser.errors


class TestDefinitions:

    def test_definition(self):
        parser = make_parser("def foo(a b) a+b")
        assert parser.parse_definition() == Function(
            Prototype('foo', ['a', 'b']),
            BinaryOp('+', V('a'), V('b')),
        )

    def test_definition_without_params(self):
        fn = make_parser("def one() 1").parse_definition()
        assert fn.prototype == Prototype('one', [])
        assert fn.body == N(1.0)

    def test_extern(self):
        assert make_parser("extern sin(x)").parse_extern() == Prototype('sin', ['x'])

    def test_toplevel_expression_is_anonymous(self):
        fn = make_parser("1+1").parse_toplevel_expr()
        assert fn.name == ANON_EXPR_NAME
        assert fn.is_anonymous
        assert fn.prototype.params == []
        assert fn.body == BinaryOp('+', N(1.0), N(1.0))

    def test_missing_function_name(self):
        parser = make_parser("def 1(x) x")
        assert parser.parse_definition() is None
        assert parser.errors[0].message == "expected function name in prototype"

    def test_missing_open_paren(self):
        parser = make_parser("extern foo x")
        assert parser.parse_extern() is None
        assert parser.errors[0].message == "expected '(' in prototype"

    def test_commas_are_not_allowed_in_prototype(self):
        parser = make_parser("def foo(a, b) a")
        assert parser.parse_definition() is None
        assert parser.errors[0].message == "expected ')' in prototype"

    def test_bad_body(self):
        parser = make_parser("def foo(a) )")
        assert parser.parse_definition() is None
        assert "unknown token" in parser.errors[0].message
