class CompilerError(Exception):
    kind = "error"

    def __init__(self, message, line=None, column=None, file=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.file = file

    def __str__(self):
        loc = ""
        if self.file:
            loc += f"{self.file}:"
        if self.line:
            loc += f"{self.line}:"
        if self.column:
            loc += f"{self.column}:"

        if loc:
            return f"{loc} {self.message}"
        return self.message


class ParseError(CompilerError):
    """Syntax error: the parser produced no AST for the construct."""
    kind = "parse"


class CodegenError(CompilerError):
    """Semantic error found while lowering: no value was emitted."""
    kind = "codegen"
