import logging

from .errors import ParseError
from .lexer import CHAR, DEF, EXTERN, IDENTIFIER, NUMBER, Token

logger = logging.getLogger(__name__)

ANON_EXPR_NAME = '__anon_expr'

DEFAULT_PRECEDENCE = {
    '<': 10,
    '+': 20,
    '-': 20,
    '*': 40,
}


class ASTNode:
    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


class NumberLiteral(ASTNode):
    def __init__(self, value: float):
        self.value = value


class VariableRef(ASTNode):
    def __init__(self, name: str):
        self.name = name


class BinaryOp(ASTNode):
    def __init__(self, op: str, left: ASTNode, right: ASTNode):
        self.op = op
        self.left = left
        self.right = right


class Call(ASTNode):
    def __init__(self, callee: str, args):
        self.callee = callee
        self.args = list(args)


class Prototype(ASTNode):
    def __init__(self, name: str, params=None):
        self.name = name
        self.params = list(params or [])


class Function(ASTNode):
    def __init__(self, prototype: Prototype, body: ASTNode):
        self.prototype = prototype
        self.body = body

    @property
    def name(self):
        return self.prototype.name

    @property
    def is_anonymous(self):
        return self.prototype.name == ANON_EXPR_NAME


class Parser:
    """Single-token lookahead parser.

    Binary expressions are parsed by precedence climbing over
    ``self.precedence``; everything else is plain recursive descent. A parse
    method that fails records a ``ParseError`` in ``self.errors`` and returns
    ``None``; callers pass the ``None`` straight up without trying to
    recover.
    """

    def __init__(self, lexer, precedence=None, filename=None):
        self.lexer = lexer
        self.filename = filename
        self.precedence = dict(DEFAULT_PRECEDENCE if precedence is None else precedence)
        self.current = Token(CHAR, None)
        self.errors = []

    def install_operator(self, op, precedence):
        self.precedence[op] = precedence

    def next_token(self):
        self.current = self.lexer.next_token()
        return self.current

    def error(self, message):
        token = self.current
        err = ParseError(message, token.line, token.column, file=self.filename)
        logger.debug("parse error at %r: %s", token, message)
        self.errors.append(err)
        return None

    def token_precedence(self):
        if self.current.type != CHAR:
            return -1
        prec = self.precedence.get(self.current.value, -1)
        if prec <= 0:
            return -1
        return prec

    # numberexpr ::= number
    def parse_number_expr(self):
        node = NumberLiteral(self.current.value)
        self.next_token()
        return node

    # parenexpr ::= '(' expression ')'
    def parse_paren_expr(self):
        self.next_token()
        expr = self.parse_expression()
        if expr is None:
            return None
        if not self.current.is_char(')'):
            return self.error("expected ')'")
        self.next_token()
        return expr

    # identifierexpr ::= identifier | identifier '(' expression* ')'
    def parse_identifier_expr(self):
        name = self.current.value
        self.next_token()

        if not self.current.is_char('('):
            return VariableRef(name)

        self.next_token()
        args = []
        if not self.current.is_char(')'):
            while True:
                arg = self.parse_expression()
                if arg is None:
                    return None
                args.append(arg)

                if self.current.is_char(')'):
                    break
                if not self.current.is_char(','):
                    return self.error("expected ')' or ',' in argument list")
                self.next_token()

        self.next_token()
        return Call(name, args)

    # primary ::= identifierexpr | numberexpr | parenexpr
    def parse_primary(self):
        token = self.current
        if token.type == IDENTIFIER:
            return self.parse_identifier_expr()
        elif token.type == NUMBER:
            return self.parse_number_expr()
        elif token.is_char('('):
            return self.parse_paren_expr()
        return self.error("unknown token when expecting an expression")

    # binoprhs ::= (binop primary)*
    def parse_bin_op_rhs(self, min_prec, lhs):
        while True:
            prec = self.token_precedence()
            if prec < min_prec:
                return lhs

            op = self.current.value
            self.next_token()

            rhs = self.parse_primary()
            if rhs is None:
                return None

            # A tighter operator after rhs takes rhs as its own left operand
            if prec < self.token_precedence():
                rhs = self.parse_bin_op_rhs(prec + 1, rhs)
                if rhs is None:
                    return None

            lhs = BinaryOp(op, lhs, rhs)

    # expression ::= primary binoprhs
    def parse_expression(self):
        lhs = self.parse_primary()
        if lhs is None:
            return None
        return self.parse_bin_op_rhs(0, lhs)

    # prototype ::= identifier '(' identifier* ')'
    def parse_prototype(self):
        if self.current.type != IDENTIFIER:
            return self.error("expected function name in prototype")
        name = self.current.value
        self.next_token()

        if not self.current.is_char('('):
            return self.error("expected '(' in prototype")

        params = []
        while self.next_token().type == IDENTIFIER:
            params.append(self.current.value)

        if not self.current.is_char(')'):
            return self.error("expected ')' in prototype")
        self.next_token()

        return Prototype(name, params)

    # definition ::= 'def' prototype expression
    def parse_definition(self):
        if self.current.type == DEF:
            self.next_token()
        proto = self.parse_prototype()
        if proto is None:
            return None
        body = self.parse_expression()
        if body is None:
            return None
        return Function(proto, body)

    # external ::= 'extern' prototype
    def parse_extern(self):
        if self.current.type == EXTERN:
            self.next_token()
        return self.parse_prototype()

    # toplevelexpr ::= expression
    def parse_toplevel_expr(self):
        body = self.parse_expression()
        if body is None:
            return None
        return Function(Prototype(ANON_EXPR_NAME, []), body)
