"""
Logical-Guard Compiler and Deferred Rewrite Registry.

Expansions are built while scanning a module, but the name of the guard
identifier they all test is only known once the whole module has been seen:
an existing ``DEBUG`` import may be reused, or a fresh ``_DEBUG`` constant
synthesized. Rewriting is therefore two-phase:

1. ``ExpansionRegistry.register(site, guard_builder)`` records a call site and
   a pure function ``guard_name -> expression``.
2. ``ExpansionRegistry.finalize(host, guard_name)`` runs once per module and
   replaces every registered site, in registration order.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence

from debug_macros.core.host import Node, Site, TreeHost

logger = logging.getLogger(__name__)

GuardBuilder = Callable[[str], Node]


def build_logical_guard(host: TreeHost, conditions: Sequence[Node], terminal: Node) -> GuardBuilder:
  """
  Compiles ``guard && cond_1 && ... && cond_n && terminal``.

  The chain is left-associated: each ``&&`` takes the chain built so far as
  its left operand. The guard identifier is always the leftmost operand.

  Conditions are placed in the chain as given, not copied, so rewrites of
  calls nested inside them still land in the output tree.

  Args:
      host: Tree capabilities.
      conditions: Leading conditions, evaluated after the guard and before the terminal call.
      terminal: The diagnostic call expression.

  Returns:
      GuardBuilder: Function from guard name to the combined expression. Each
      invocation builds fresh && nodes; the inputs are never modified.
  """
  leading = list(conditions)

  def build(guard_name: str) -> Node:
    expression = host.identifier(guard_name)
    for operand in [*leading, terminal]:
      expression = host.logical_and(expression, operand)
    return expression

  return build


@dataclass(frozen=True)
class PendingExpansion:
  """
  A call site waiting for the guard name.

  Attributes:
      site: Host path of the expression statement to rewrite.
      build: Guard builder producing the replacement expression.
  """

  site: Site
  build: GuardBuilder


class ExpansionRegistry:
  """
  Ordered collection of pending expansions for one module.
  """

  def __init__(self) -> None:
    self._pending: List[PendingExpansion] = []
    self._finalized = False

  def __len__(self) -> int:
    return len(self._pending)

  @property
  def finalized(self) -> bool:
    return self._finalized

  def register(self, site: Site, build: GuardBuilder) -> None:
    if self._finalized:
      raise RuntimeError("Cannot register expansions after finalization")
    self._pending.append(PendingExpansion(site, build))

  def finalize(self, host: TreeHost, guard_name: str) -> int:
    """
    Rewrites every registered site as ``(<guard expression>)``.

    Args:
        host: Tree capabilities.
        guard_name: The resolved guard identifier.

    Returns:
        int: Number of sites rewritten.

    Raises:
        RuntimeError: If called more than once.
    """
    if self._finalized:
      raise RuntimeError("Expansions were already finalized for this module")
    self._finalized = True

    for pending in self._pending:
      host.replace_expression(pending.site, host.parenthesized(pending.build(guard_name)))

    logger.debug("Finalized %d expansion(s) with guard %s", len(self._pending), guard_name)
    return len(self._pending)
