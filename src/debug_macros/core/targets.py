"""
Helper Target Selection.

Decides what a diagnostic call compiles to:

- ``<global>.<helper>(args)`` when helpers are externalized onto a namespace object,
- ``<helper>(args)`` when externalized without a namespace,
- ``console.<method>(args)`` otherwise.

``deprecate`` has no console counterpart and maps to ``console.warn``.
"""

import enum
from typing import Dict, List

from debug_macros.config import MacroConfig
from debug_macros.core.host import Node, TreeHost

CONSOLE = "console"

CONSOLE_METHODS: Dict[str, str] = {
  "assert": "assert",
  "warn": "warn",
  "deprecate": "warn",
}


class HelperTarget(enum.Enum):
  """Where diagnostic calls are routed for a run."""

  CONSOLE = "console"
  EXTERNAL = "external"
  GLOBAL = "global"

  @classmethod
  def from_config(cls, config: MacroConfig) -> "HelperTarget":
    if not config.externalize_helpers:
      return cls.CONSOLE
    if config.helpers_global:
      return cls.GLOBAL
    return cls.EXTERNAL


def create_helper_call(host: TreeHost, config: MacroConfig, helper: str, arguments: List[Node]) -> Node:
  """
  Builds the terminal diagnostic call for ``helper``.

  Args:
      host: Tree capabilities.
      config: Run configuration (externalization policy).
      helper: ``assert``, ``warn`` or ``deprecate``.
      arguments: Final argument list of the call.

  Returns:
      Node: The call expression.
  """
  target = HelperTarget.from_config(config)
  if target is HelperTarget.GLOBAL:
    callee = host.member(host.identifier(config.helpers_global), helper)
  elif target is HelperTarget.EXTERNAL:
    callee = host.identifier(helper)
  else:
    callee = host.member(host.identifier(CONSOLE), CONSOLE_METHODS[helper])
  return host.call(callee, list(arguments))
