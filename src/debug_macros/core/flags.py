"""
Flag Table Resolver.

Turns a named import from a flags module into literal constants:

.. code-block:: javascript

    import { DEBUG, FEATURE_A as A } from '@ember/env-flags';
    // becomes
    const DEBUG = 1;
    const A = 0;

Every requested name must exist in the table. The whole import is validated
before any declaration is built, so a bad flag never leaves partial output.
"""

import logging
from typing import List, Mapping, Sequence, Tuple

from debug_macros.core.errors import UnknownFlagError
from debug_macros.core.host import Node, Site, TreeHost

logger = logging.getLogger(__name__)

FlagTable = Mapping[str, int]


def generate_flag_constants(
  host: TreeHost,
  specifiers: Sequence[Tuple[str, str]],
  flag_table: FlagTable,
  source: str,
) -> List[Node]:
  """
  Builds one constant declaration per specifier, in specifier order.

  Args:
      host: Tree capabilities used to build the declarations.
      specifiers: (imported name, local name) pairs.
      flag_table: Flag name -> integer value.
      source: Module the specifiers were imported from (for error messages).

  Returns:
      List[Node]: ``const <local> = <value>;`` declarations.

  Raises:
      UnknownFlagError: If any imported name is missing from ``flag_table``.
  """
  for imported, _ in specifiers:
    if imported not in flag_table:
      raise UnknownFlagError(imported, source)

  return [host.const_declaration(local, host.literal(flag_table[imported])) for imported, local in specifiers]


def inline_flags(host: TreeHost, site: Site, flag_table: FlagTable) -> int:
  """
  Replaces an import declaration with the constants for its specifiers.

  Returns:
      int: Number of constants emitted.
  """
  source = host.import_source(site)
  declarations = generate_flag_constants(host, host.import_specifiers(site), flag_table, source)
  host.replace_with_multiple(site, declarations)
  logger.debug("Inlined %d flag(s) from %s", len(declarations), source)
  return len(declarations)


def select_feature_table(features: Sequence, source: str):
  """
  Finds the feature-flag table configured for an import source.

  Only the first matching entry counts.

  Args:
      features: Ordered ``FeatureFlags`` entries from the configuration.
      source: The import declaration's module string.

  Returns:
      The matching entry, or None when the import is not a features import.
  """
  for features_entry in features:
    if features_entry.features_import == source:
      return features_entry
  return None
