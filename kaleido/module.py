import logging

import llvmlite.binding as llvm
from llvmlite import ir

logger = logging.getLogger(__name__)

DOUBLE = ir.DoubleType()

_initialized = False


def initialize_llvm():
    global _initialized
    if _initialized:
        return
    try:
        llvm.initialize()
    except RuntimeError as exc:
        # llvmlite 0.45+ initializes the core itself and rejects this call
        if "deprecated" not in str(exc):
            raise
    _initialized = True


def _release_name(module, name):
    # Depends on llvmlite internals: ir.Module has no API to unregister a
    # global name, so drop it from the module NameScope directly.
    module.scope._useset.discard(name)


class TargetModule:
    """The function table that lowering emits into.

    Wraps an ``llvmlite.ir.Module`` in which every function has the shape
    ``double f(double, ...)``. Instructions are emitted through the builder
    returned by ``begin_function_body``.
    """

    def __init__(self, name="kaleido"):
        self.module = ir.Module(name=name)
        self.builder = None

    def declare_function(self, name, param_names):
        func_ty = ir.FunctionType(DOUBLE, [DOUBLE] * len(param_names))
        func = ir.Function(self.module, func_ty, name=name)
        for arg, pname in zip(func.args, param_names):
            arg.name = pname
        logger.debug("declared %s/%d", name, len(param_names))
        return func

    def lookup_function(self, name):
        func = self.module.globals.get(name)
        if isinstance(func, ir.Function):
            return func
        return None

    def functions(self):
        return [g.name for g in self.module.functions]

    def begin_function_body(self, func):
        block = func.append_basic_block(name="entry")
        self.builder = ir.IRBuilder(block)
        return self.builder

    def end_function_body(self):
        self.builder = None

    def clear_function_body(self, func):
        func.blocks.clear()
        if self.builder is not None and self.builder.function is func:
            self.builder = None
        logger.debug("cleared body of %s", func.name)

    def erase_function(self, func):
        del self.module.globals[func.name]
        _release_name(self.module, func.name)
        if self.builder is not None and self.builder.function is func:
            self.builder = None
        logger.debug("erased %s", func.name)

    def verify(self):
        """Parse the module text back with LLVM and run its verifier.

        Raises RuntimeError describing the first problem found.
        """
        initialize_llvm()
        llvm.parse_assembly(str(self.module)).verify()

    def reachable_declarations(self, func):
        """Names of bodiless functions that ``func`` may end up calling.

        A callee that is no longer in the module (erased after a failed
        definition) is reported as well.
        """
        seen = set()
        pending = [func]
        missing = []
        while pending:
            f = pending.pop()
            if f.name in seen:
                continue
            seen.add(f.name)
            if f.is_declaration or self.lookup_function(f.name) is not f:
                missing.append(f.name)
                continue
            for block in f.blocks:
                for instr in block.instructions:
                    if isinstance(instr, ir.CallInstr) and isinstance(instr.callee, ir.Function):
                        pending.append(instr.callee)
        return missing

    def _current(self):
        if self.builder is None:
            raise RuntimeError("no function body in progress")
        return self.builder

    # --- emission primitives ---

    def constant(self, value):
        return ir.Constant(DOUBLE, float(value))

    def fadd(self, lhs, rhs):
        return self._current().fadd(lhs, rhs, name="addtmp")

    def fsub(self, lhs, rhs):
        return self._current().fsub(lhs, rhs, name="subtmp")

    def fmul(self, lhs, rhs):
        return self._current().fmul(lhs, rhs, name="multmp")

    def fcmp_ult(self, lhs, rhs):
        return self._current().fcmp_unordered('<', lhs, rhs, name="cmptmp")

    def uitofp(self, value):
        return self._current().uitofp(value, DOUBLE, name="booltmp")

    def call(self, func, args):
        return self._current().call(func, args, name="calltmp")

    def ret(self, value):
        return self._current().ret(value)

    def __str__(self):
        return str(self.module)
