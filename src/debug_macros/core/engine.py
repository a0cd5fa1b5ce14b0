"""
Orchestration Engine for Macro Expansion.

``MacroEngine`` transforms one module at a time, in place:

1.  **Binding collection**: helpers imported from the debug-tools module are
    recorded (local name -> helper name).
2.  **Dispatch**: every expression statement calling a collected helper is
    handed to its builder, in source order. Builders either delete the
    statement (expired deprecations) or register a pending expansion.
3.  **Guard injection**: an existing ``DEBUG`` import from the env-flags
    module is reused (and inlined to a constant); otherwise a collision-free
    ``_DEBUG`` constant is synthesized, but only if something needs it.
4.  **Finalization**: all pending expansions are rewritten with the guard name.
5.  **Flag inlining**: remaining env-flags and feature-flags imports become
    constants.
6.  **Import cleanup**: the helpers import is deleted, or rewritten to the
    externalized helpers module.

No state survives between modules; the engine only holds the immutable
configuration.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from debug_macros.config import DEBUG_FLAG, MacroConfig
from debug_macros.core.dispatch import BindingTable, dispatch
from debug_macros.core.errors import UnknownFlagError
from debug_macros.core.expansions import ExpansionContext
from debug_macros.core.flags import inline_flags, select_feature_table
from debug_macros.core.guard import ExpansionRegistry
from debug_macros.core.host import Site, TreeHost
from debug_macros.estree.host import EstreeHost

logger = logging.getLogger(__name__)


class ExpansionResult(BaseModel):
  """
  Summary of one module transformation.
  """

  guard: Optional[str] = Field(None, description="Name of the guard identifier used by expansions.")
  synthesized_guard: bool = Field(False, description="True if a guard constant was inserted.")
  expanded: int = Field(0, description="Call sites rewritten into guarded expressions.")
  removed: int = Field(0, description="Expired deprecations deleted.")
  inlined_flags: int = Field(0, description="Flag constants produced from flag imports.")
  helpers_import: Optional[str] = Field(None, description="What happened to the helpers import: removed, rewritten or kept.")


class MacroEngine:
  """
  Expands debug macros and inlines flags in a module.

  Example:
      >>> engine = MacroEngine(MacroConfig(envFlags={"flags": {"DEBUG": 1}}))
      >>> result = engine.run(EstreeHost(program))  # doctest: +SKIP
  """

  def __init__(self, config: MacroConfig):
    self.config = config

  def run(self, host: TreeHost) -> ExpansionResult:
    """
    Transforms the module behind ``host``.

    Args:
        host: Tree capabilities for the module; its tree is mutated in place.

    Returns:
        ExpansionResult: Counters describing what changed.

    Raises:
        MacroExpansionError: On unknown flags, bad deprecation metadata, or
            (strict mode) unsupported helpers. The tree may be partially
            transformed when this happens.
    """
    result = ExpansionResult()
    bindings = BindingTable()
    registry = ExpansionRegistry()
    ctx = ExpansionContext(host=host, config=self.config, registry=registry)

    self._collect_bindings(host, bindings)

    handled = 0
    for site in host.expression_statements():
      # Calls nested in an already removed deprecation are gone too.
      if not host.is_attached(site):
        continue
      if dispatch(ctx, bindings, site):
        handled += 1

    result.expanded = len(registry)
    result.removed = handled - len(registry)

    self._inject_guard(host, registry, result)
    result.inlined_flags += self._inline_flag_imports(host)
    result.helpers_import = self._clean_imports(host, bindings)
    return result

  def _collect_bindings(self, host: TreeHost, bindings: BindingTable) -> None:
    source = self.config.debug_tools.source
    for site in host.import_declarations():
      if host.import_source(site) != source:
        continue
      for imported, local in host.import_specifiers(site):
        bindings.add(imported, local)
    logger.debug("Collected %d helper binding(s) from %s", len(bindings), source)

  def _has_debug_module(self, host: TreeHost) -> bool:
    binding = host.get_binding(DEBUG_FLAG)
    return bool(binding and binding.kind == "module" and binding.source == self.config.env_flags.source)

  def _inject_guard(self, host: TreeHost, registry: ExpansionRegistry, result: ExpansionResult) -> None:
    """
    Resolves the guard name and finalizes pending expansions with it.
    """
    env_flags = self.config.env_flags

    if self._has_debug_module(host):
      result.inlined_flags += inline_flags(host, host.get_binding(DEBUG_FLAG).path, env_flags.flags)
      result.guard = DEBUG_FLAG
      registry.finalize(host, DEBUG_FLAG)
      return

    name = host.generate_uid(DEBUG_FLAG)
    if len(registry) > 0:
      if DEBUG_FLAG not in env_flags.flags:
        raise UnknownFlagError(DEBUG_FLAG, env_flags.source)
      host.insert_at_top(host.const_declaration(name, host.literal(env_flags.flags[DEBUG_FLAG])))
      result.synthesized_guard = True
      result.guard = name
    registry.finalize(host, name)

  def _inline_flag_imports(self, host: TreeHost) -> int:
    count = 0
    for site in host.import_declarations():
      source = host.import_source(site)
      if source == self.config.env_flags.source:
        count += inline_flags(host, site, self.config.env_flags.flags)
        continue
      features = select_feature_table(self.config.features, source)
      if features is not None:
        count += inline_flags(host, site, features.flags)
    return count

  def _clean_imports(self, host: TreeHost, bindings: BindingTable) -> Optional[str]:
    """
    Removes or externalizes the helpers import.

    All helpers come from one import, so locating it through the first
    collected local binding is enough.
    """
    first = bindings.first_local()
    if first is None:
      return None
    binding = host.get_binding(first)
    if binding is None:
      return None
    site: Site = binding.path

    module = self.config.helpers_module
    if module:
      if isinstance(module, str):
        host.set_import_source(site, module)
        return "rewritten"
      return "kept"

    host.remove(site)
    return "removed"


def expand(tree: Any, config: MacroConfig) -> ExpansionResult:
  """
  Expands an ESTree ``Program`` (or Babel ``File``) in place.

  Args:
      tree: Parsed module as plain dicts.
      config: Run configuration.

  Returns:
      ExpansionResult: Counters describing what changed.
  """
  return MacroEngine(config).run(EstreeHost(tree))
