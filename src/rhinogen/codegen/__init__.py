"""
Code generation for rhinogen.

A grammar is lowered into a declaration tree (``declarations``) which the
emitter renders as a Python module.
"""

from .declarations import ModuleDecl, build_module_decl
from .emitter import EmitError, PythonEmitter, emit_module

__all__ = [
    "ModuleDecl",
    "build_module_decl",
    "EmitError",
    "PythonEmitter",
    "emit_module",
]
