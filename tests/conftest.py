"""Shared fixtures for the kaleido test suite.

Most tests drive one stage at a time: a primed ``Parser`` for syntax tests,
and a ``lower`` helper that parses one top-level construct and lowers it into
a fresh ``TargetModule`` for code generation tests.
"""

import pytest

from kaleido.codegen import CodeGen
from kaleido.lexer import DEF, EXTERN, Lexer
from kaleido.module import TargetModule
from kaleido.parser import Parser


def make_parser(source, precedence=None):
    parser = Parser(Lexer(source), precedence)
    parser.next_token()
    return parser


def parse_construct(parser):
    if parser.current.type == DEF:
        return parser.parse_definition()
    if parser.current.type == EXTERN:
        return parser.parse_extern()
    return parser.parse_toplevel_expr()


@pytest.fixture
def module():
    return TargetModule("test")


@pytest.fixture
def codegen(module):
    return CodeGen(module)


@pytest.fixture
def lower(codegen):
    """Parse one construct from ``source`` and lower it; returns the ir.Function or None."""

    def _lower(source, precedence=None):
        parser = make_parser(source, precedence)
        node = parse_construct(parser)
        assert node is not None, parser.errors
        return codegen.visit(node)

    return _lower


@pytest.fixture(scope="session")
def jit():
    from kaleido.jit import Jit
    return Jit()
