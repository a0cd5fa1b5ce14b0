"""
Macro Dispatch.

Maps the helpers imported from the debug-tools module to their builders.
Call sites are recognized by their callee's local name, which the
``BindingTable`` resolves back to the imported helper name.
"""

import enum
import logging
from typing import Callable, Dict, Iterator, Optional, Tuple

from debug_macros.core.errors import UnknownMacroError
from debug_macros.core.expansions import ExpansionContext, expand_assert, expand_deprecate, expand_warn
from debug_macros.core.host import Node, Site

logger = logging.getLogger(__name__)


class MacroKind(str, enum.Enum):
  ASSERT = "assert"
  WARN = "warn"
  DEPRECATE = "deprecate"


Builder = Callable[[ExpansionContext, Site, Node], None]

BUILDERS: Dict[MacroKind, Builder] = {
  MacroKind.ASSERT: expand_assert,
  MacroKind.WARN: expand_warn,
  MacroKind.DEPRECATE: expand_deprecate,
}


class BindingTable:
  """
  Insertion-ordered mapping of local helper names to imported helper names.

  ``import { assert as check, warn } from '@ember/debug-tools'`` records
  ``check -> assert`` and ``warn -> warn``.
  """

  def __init__(self) -> None:
    self._local_to_imported: Dict[str, str] = {}

  def __len__(self) -> int:
    return len(self._local_to_imported)

  def __contains__(self, local: str) -> bool:
    return local in self._local_to_imported

  def __iter__(self) -> Iterator[Tuple[str, str]]:
    return iter(self._local_to_imported.items())

  def add(self, imported: str, local: str) -> None:
    self._local_to_imported[local] = imported

  def resolve(self, local: str) -> Optional[str]:
    return self._local_to_imported.get(local)

  def first_local(self) -> Optional[str]:
    return next(iter(self._local_to_imported), None)


def dispatch(ctx: ExpansionContext, bindings: BindingTable, site: Site) -> bool:
  """
  Routes an expression statement to its macro builder.

  Statements that are not calls to a collected helper are left alone.

  Args:
      ctx: Expansion context of the module.
      bindings: Collected helper bindings.
      site: Path of the expression statement.

  Returns:
      bool: True if a builder handled the statement.

  Raises:
      UnknownMacroError: In strict mode, for helpers no builder handles.
  """
  host = ctx.host
  expression = host.statement_expression(site)
  local = host.callee_name(expression)
  if local is None or local not in bindings:
    return False

  imported = bindings.resolve(local)
  try:
    kind = MacroKind(imported)
  except ValueError:
    if ctx.config.strict_mode:
      raise UnknownMacroError(imported, ctx.config.debug_tools.source)
    logger.warning("Skipping call to '%s': no debug macro named '%s'", local, imported)
    return False

  BUILDERS[kind](ctx, site, expression)
  return True
