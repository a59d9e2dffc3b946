"""Front end for a small expression language lowered to LLVM IR."""

from .codegen import CodeGen
from .driver import Session
from .errors import CodegenError, CompilerError, ParseError
from .lexer import Lexer, Token
from .module import TargetModule
from .parser import DEFAULT_PRECEDENCE, Parser

__all__ = [
    "CodeGen",
    "CodegenError",
    "CompilerError",
    "DEFAULT_PRECEDENCE",
    "Lexer",
    "ParseError",
    "Parser",
    "Session",
    "TargetModule",
    "Token",
]
