"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A default run configuration.
- Small factories for ESTree modules using debug macros.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'debug_macros' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from debug_macros.config import MacroConfig  # noqa: E402
from debug_macros.estree import nodes as n  # noqa: E402


@pytest.fixture
def config():
  """Console helpers, DEBUG on, package at 1.0.0."""
  return MacroConfig(packageVersion="1.0.0", envFlags={"flags": {"DEBUG": 1}})


@pytest.fixture
def helpers_import():
  """Factory for ``import { ... } from '@ember/debug-tools'``."""

  def make(*names, source="@ember/debug-tools"):
    specifiers = []
    for name in names:
      imported, _, local = name.partition(" as ")
      specifiers.append(n.import_specifier(imported, local or None))
    return n.import_declaration(source, specifiers)

  return make


@pytest.fixture
def call_stmt():
  """Factory for ``callee(arg, ...);`` where str args become identifiers and others literals."""

  def make(callee, *args):
    arguments = [a if isinstance(a, dict) else n.identifier(a) for a in args]
    return n.expression_statement(n.call_expression(n.identifier(callee), arguments))

  return make
