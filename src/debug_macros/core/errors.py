"""
Expansion Errors.

Every error here is fatal to the module being transformed. They signal
mistakes in the source being compiled or in the build configuration, and
are meant to be fixed by the author rather than recovered from.
"""

from typing import Optional


class MacroExpansionError(Exception):
  """Base class for all errors raised while expanding a module."""


class UnknownFlagError(MacroExpansionError):
  """
  A flag import names a flag missing from the selected flag table.

  Attributes:
      flag: The imported flag name.
      source: The module the flag was imported from.
  """

  def __init__(self, flag: str, source: str):
    self.flag = flag
    self.source = source
    super().__init__(f"Imported {flag} from {source} which is not a supported flag.")


class DeprecationMetaError(MacroExpansionError, ReferenceError):
  """
  A ``deprecate`` call's meta object lacks a required field.

  Attributes:
      field: Name of the missing field (``id`` or ``until``).
  """

  def __init__(self, field: str):
    self.field = field
    super().__init__(f'deprecate\'s meta information requires an "{field}" field.')


class MacroArgumentError(MacroExpansionError, TypeError):
  """A macro call has arguments of the wrong number or shape."""

  def __init__(self, macro: str, reason: str, line: Optional[int] = None):
    self.macro = macro
    location = f" (line {line})" if line is not None else ""
    super().__init__(f"{macro}(){location}: {reason}")


class UnknownMacroError(MacroExpansionError):
  """Strict mode only: a helper was imported that no builder handles."""

  def __init__(self, imported: str, source: str):
    self.imported = imported
    self.source = source
    super().__init__(f"'{imported}' imported from {source} is not a supported debug macro.")
