"""
debug-macros Package.

Compile-time expansion of debug macros in JavaScript modules. Calls to
``assert``, ``warn`` and ``deprecate`` imported from the debug-tools module
become flag-guarded expressions, and flag imports become literal constants.

Input is an ESTree JSON tree (as produced by acorn, espree or
``@babel/parser``), transformed in place.

Usage
-----

.. code-block:: python

    import json
    import debug_macros as dm

    config = dm.MacroConfig(envFlags={"flags": {"DEBUG": 1}}, packageVersion="1.2.0")
    tree = json.load(open("module.ast.json"))
    result = dm.expand(tree, config)
    print(dm.to_javascript(tree))
"""

import json
from typing import Any

from debug_macros.config import MacroConfig
from debug_macros.core.engine import ExpansionResult, MacroEngine, expand
from debug_macros.core.errors import (
  DeprecationMetaError,
  MacroArgumentError,
  MacroExpansionError,
  UnknownFlagError,
  UnknownMacroError,
)
from debug_macros.estree.emitter import EstreeEmitter

__version__ = "0.1.0"


def to_javascript(tree: Any) -> str:
  """Renders an ESTree tree as JavaScript source."""
  return EstreeEmitter().emit(tree)


def expand_source_json(text: str, config: MacroConfig) -> str:
  """
  Expands a module given as ESTree JSON text.

  Args:
      text (str): JSON document holding a ``Program`` or ``File`` node.
      config (MacroConfig): Run configuration.

  Returns:
      str: The transformed tree, serialized as JSON.

  Raises:
      MacroExpansionError: If the module cannot be expanded.
  """
  tree = json.loads(text)
  expand(tree, config)
  return json.dumps(tree, indent=2)


__all__ = [
  "DeprecationMetaError",
  "ExpansionResult",
  "MacroArgumentError",
  "MacroConfig",
  "MacroEngine",
  "MacroExpansionError",
  "UnknownFlagError",
  "UnknownMacroError",
  "expand",
  "expand_source_json",
  "to_javascript",
  "__version__",
]
