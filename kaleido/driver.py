import logging
import sys

from .codegen import CodeGen
from .lexer import DEF, EOF, EXTERN, Lexer
from .module import TargetModule
from .parser import Parser

logger = logging.getLogger(__name__)


class Session:
    """One compilation session: scanner, parser, target module and lowering.

    ``run`` is the top-level loop. It dispatches on the leading token of each
    construct, reports diagnostics to ``out`` and skips the offending token
    after a parse failure.
    """

    def __init__(self, source, precedence=None, module_name="kaleido",
                 evaluate=False, out=None, prompt="", filename=None):
        self.lexer = Lexer(source)
        self.parser = Parser(self.lexer, precedence, filename)
        self.module = TargetModule(module_name)
        self.codegen = CodeGen(self.module)
        self.jit = None
        if evaluate:
            from .jit import Jit
            self.jit = Jit()
        self.out = out if out is not None else sys.stderr
        self.prompt = prompt
        self.errors = []

    def emit(self, text):
        self.out.write(text + "\n")

    def report(self):
        pending = self.parser.errors + self.codegen.errors
        self.parser.errors.clear()
        self.codegen.errors.clear()
        for err in pending:
            self.emit(f"Error: {err}")
        self.errors.extend(pending)
        return pending

    def handle_definition(self):
        fn_ast = self.parser.parse_definition()
        if fn_ast is None:
            self.report()
            # Skip token for error recovery.
            self.parser.next_token()
            return None

        self.emit("Parsed a function definition.")
        fn_ir = self.codegen.visit(fn_ast)
        if fn_ir is None:
            self.report()
            return None
        self.emit(f"Read function definition:\n{fn_ir}")
        return fn_ir

    def handle_extern(self):
        proto_ast = self.parser.parse_extern()
        if proto_ast is None:
            self.report()
            self.parser.next_token()
            return None

        self.emit("Parsed an extern.")
        fn_ir = self.codegen.visit(proto_ast)
        if fn_ir is None:
            self.report()
            return None
        self.emit(f"Read extern:\n{fn_ir}")
        return fn_ir

    def handle_toplevel_expr(self):
        fn_ast = self.parser.parse_toplevel_expr()
        if fn_ast is None:
            self.report()
            self.parser.next_token()
            return None

        self.emit("Parsed a top-level expression.")
        fn_ir = self.codegen.visit(fn_ast)
        if fn_ir is None:
            self.report()
            return None
        self.emit(f"Read top-level expression:\n{fn_ir}")

        # Anonymous functions are evaluated at most once, then dropped.
        try:
            if self.jit is not None:
                missing = self.jit.unresolved(self.module, fn_ir.name)
                if missing:
                    self.codegen.error(f"unresolved external function '{missing[0]}'")
                    self.report()
                    return None
                try:
                    value = self.jit.evaluate(self.module, fn_ir.name)
                except RuntimeError as exc:
                    self.codegen.error(f"evaluation failed: {exc}")
                    self.report()
                    return None
                self.emit(f"Evaluated to {value:f}")
                return value
        finally:
            self.module.erase_function(fn_ir)
        return fn_ir

    def run(self):
        self._prompt()
        self.parser.next_token()
        while True:
            token = self.parser.current
            if token.type == EOF:
                break
            if token.is_char(';'):
                # ignore top-level semicolons.
                self.parser.next_token()
                continue
            if token.type == DEF:
                self.handle_definition()
            elif token.type == EXTERN:
                self.handle_extern()
            else:
                self.handle_toplevel_expr()
            self._prompt()

        ir_text = str(self.module)
        self.emit(ir_text)
        logger.debug("session finished with %d error(s)", len(self.errors))
        return ir_text

    def _prompt(self):
        if self.prompt:
            self.out.write(self.prompt)
            self.out.flush()
