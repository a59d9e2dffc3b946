import ctypes
import logging
import os

import llvmlite.binding as llvm

from .module import initialize_llvm

logger = logging.getLogger(__name__)

c_double = ctypes.c_double
c_void_p = ctypes.c_void_p

_native_initialized = False


def _initialize():
    global _native_initialized
    if _native_initialized:
        return
    initialize_llvm()
    llvm.initialize_native_target()
    llvm.initialize_native_asmprinter()
    _native_initialized = True


def _process_library():
    if os.name == 'nt':
        return ctypes.CDLL('msvcrt')
    return ctypes.CDLL(None)


class Jit:
    """Compiles a snapshot of a module with MCJIT and calls into it.

    Every call recompiles the module text, so functions added or erased
    since the last call are always reflected.
    """

    def __init__(self):
        _initialize()
        self.target = llvm.Target.from_default_triple()
        self.libc = _process_library()

    def resolve_symbol(self, name):
        """Make ``name`` visible to the JIT; return False if nothing provides it."""
        if llvm.address_of_symbol(name):
            return True
        try:
            cfunc = getattr(self.libc, name)
        except AttributeError:
            return False
        llvm.add_symbol(name, ctypes.cast(cfunc, c_void_p).value)
        logger.debug("bound %s to process symbol", name)
        return True

    def unresolved(self, module, name):
        """Externals reachable from ``name`` that no definition or symbol backs."""
        func = module.lookup_function(name)
        if func is None:
            return []
        return [
            callee for callee in module.reachable_declarations(func)
            if module.lookup_function(callee) is None or not self.resolve_symbol(callee)
        ]

    def compile(self, module):
        ir_text = str(module)
        mod = llvm.parse_assembly(ir_text)
        mod.verify()
        # The engine takes ownership of its target machine
        target_machine = self.target.create_target_machine()
        mod.triple = target_machine.triple
        ee = llvm.create_mcjit_compiler(mod, target_machine)
        ee.finalize_object()
        logger.debug("compiled module %r", mod.name)
        return ee

    def call(self, module, name, *args):
        missing = self.unresolved(module, name)
        if missing:
            raise LookupError(f"unresolved external function '{missing[0]}'")
        ee = self.compile(module)
        func_ptr = ee.get_function_address(name)
        if not func_ptr:
            raise LookupError(f"function '{name}' not found in JIT module")
        cfunc = ctypes.CFUNCTYPE(c_double, *([c_double] * len(args)))(func_ptr)
        return cfunc(*[float(a) for a in args])

    def evaluate(self, module, name):
        return self.call(module, name)
