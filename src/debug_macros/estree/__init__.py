"""
ESTree Host Package.

In-memory ESTree JSON trees: node constructors, node paths, module scope,
the ``TreeHost`` implementation used by the engine, and a JavaScript emitter.
"""

from debug_macros.estree.emitter import EmitError, EstreeEmitter
from debug_macros.estree.host import EstreeHost
from debug_macros.estree.paths import NodePath
from debug_macros.estree.scope import Binding, ModuleScope

__all__ = [
  "Binding",
  "EmitError",
  "EstreeEmitter",
  "EstreeHost",
  "ModuleScope",
  "NodePath",
]
