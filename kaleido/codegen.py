import logging

from .errors import CodegenError
from .module import TargetModule

logger = logging.getLogger(__name__)


class CodeGen:
    """Lowers AST nodes into a ``TargetModule``.

    Every ``visit_*`` method returns the emitted value, or ``None`` after
    recording a ``CodegenError`` in ``self.errors``.
    """

    def __init__(self, module=None):
        self.module = module if module is not None else TargetModule()
        self.named_values = {}
        self.errors = []

    def error(self, message):
        logger.debug("codegen error: %s", message)
        self.errors.append(CodegenError(message))
        return None

    def visit(self, node):
        method_name = f'visit_{type(node).__name__}'
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node):
        raise TypeError(f"No visit_{type(node).__name__} method")

    def visit_NumberLiteral(self, node):
        return self.module.constant(node.value)

    def visit_VariableRef(self, node):
        value = self.named_values.get(node.name)
        if value is None:
            return self.error(f"unknown variable name '{node.name}'")
        return value

    def visit_BinaryOp(self, node):
        left = self.visit(node.left)
        if left is None:
            return None
        right = self.visit(node.right)
        if right is None:
            return None

        if node.op == '+':
            return self.module.fadd(left, right)
        elif node.op == '-':
            return self.module.fsub(left, right)
        elif node.op == '*':
            return self.module.fmul(left, right)
        elif node.op == '<':
            cmp = self.module.fcmp_ult(left, right)
            # i1 -> 0.0 / 1.0
            return self.module.uitofp(cmp)
        return self.error(f"invalid binary operator '{node.op}'")

    def visit_Call(self, node):
        callee = self.module.lookup_function(node.callee)
        if callee is None:
            return self.error(f"unknown function referenced '{node.callee}'")

        if len(callee.args) != len(node.args):
            return self.error(
                f"incorrect number of arguments passed to '{node.callee}': "
                f"expected {len(callee.args)}, got {len(node.args)}"
            )

        args = []
        for arg in node.args:
            value = self.visit(arg)
            if value is None:
                return None
            args.append(value)
        return self.module.call(callee, args)

    def visit_Prototype(self, node):
        func = self.module.lookup_function(node.name)
        if func is None:
            return self.module.declare_function(node.name, node.params)
        if len(func.args) != len(node.params):
            return self.error(
                f"redeclaration of function '{node.name}' with different number of arguments"
            )
        return func

    def _discard(self, func, declared):
        # An extern may already have callers; fall back to the bare declaration
        if declared:
            self.module.clear_function_body(func)
        else:
            self.module.erase_function(func)

    def visit_Function(self, node):
        proto = node.prototype
        func = self.module.lookup_function(proto.name)
        declared = func is not None
        if func is None:
            func = self.module.declare_function(proto.name, proto.params)
        else:
            if not func.is_declaration:
                return self.error(f"function '{proto.name}' cannot be redefined")
            if len(func.args) != len(proto.params):
                return self.error(
                    f"redefinition of function '{proto.name}' with different number of arguments"
                )
            # The body refers to the names given here, not those of the extern
            for arg, pname in zip(func.args, proto.params):
                if arg.name != pname:
                    arg.name = pname

        self.module.begin_function_body(func)
        self.named_values = dict(zip(proto.params, func.args))

        ret_val = self.visit(node.body)
        if ret_val is None:
            self._discard(func, declared)
            self.named_values = {}
            return None

        self.module.ret(ret_val)
        self.module.end_function_body()
        self.named_values = {}

        try:
            self.module.verify()
        except RuntimeError as exc:
            self._discard(func, declared)
            return self.error(f"invalid function '{proto.name}': {exc}")
        logger.debug("defined %s", proto.name)
        return func
