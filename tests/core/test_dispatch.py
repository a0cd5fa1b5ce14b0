"""
Tests for Macro Dispatch and the BindingTable.
"""

from unittest.mock import patch

import pytest

from debug_macros.config import MacroConfig
from debug_macros.core.dispatch import BindingTable, MacroKind, dispatch
from debug_macros.core.errors import UnknownMacroError
from debug_macros.core.expansions import ExpansionContext
from debug_macros.core.guard import ExpansionRegistry
from debug_macros.estree import nodes as n
from debug_macros.estree.host import EstreeHost


def setup_module_ctx(statement, strict=False):
  host = EstreeHost(n.program([statement]))
  config = MacroConfig(strictMode=strict, envFlags={"flags": {"DEBUG": 1}})
  ctx = ExpansionContext(host=host, config=config, registry=ExpansionRegistry())
  return ctx, host.expression_statements()[0]


def test_binding_table_keeps_insertion_order():
  table = BindingTable()
  table.add("warn", "w")
  table.add("assert", "check")

  assert list(table) == [("w", "warn"), ("check", "assert")]
  assert table.first_local() == "w"
  assert table.resolve("check") == "assert"
  assert table.resolve("assert") is None


def test_aliased_call_routes_by_imported_name(call_stmt):
  ctx, site = setup_module_ctx(call_stmt("check", "x"))
  bindings = BindingTable()
  bindings.add("assert", "check")

  with patch.dict("debug_macros.core.dispatch.BUILDERS", {MacroKind.ASSERT: lambda *a: None}) as builders:
    assert dispatch(ctx, bindings, site) is True
    assert MacroKind.ASSERT in builders


def test_non_helper_calls_are_ignored(call_stmt):
  ctx, site = setup_module_ctx(call_stmt("log"))
  bindings = BindingTable()
  bindings.add("warn", "warn")

  assert dispatch(ctx, bindings, site) is False
  assert len(ctx.registry) == 0


def test_non_call_statement_is_ignored():
  ctx, site = setup_module_ctx(n.expression_statement(n.identifier("warn")))
  bindings = BindingTable()
  bindings.add("warn", "warn")

  assert dispatch(ctx, bindings, site) is False


def test_unknown_helper_skipped_with_warning(call_stmt, caplog):
  ctx, site = setup_module_ctx(call_stmt("runInDebug"))
  bindings = BindingTable()
  bindings.add("runInDebug", "runInDebug")

  with caplog.at_level("WARNING", logger="debug_macros.core.dispatch"):
    assert dispatch(ctx, bindings, site) is False
  assert "runInDebug" in caplog.text
  assert len(ctx.registry) == 0


def test_unknown_helper_fails_in_strict_mode(call_stmt):
  ctx, site = setup_module_ctx(call_stmt("runInDebug"), strict=True)
  bindings = BindingTable()
  bindings.add("runInDebug", "runInDebug")

  with pytest.raises(UnknownMacroError, match="runInDebug"):
    dispatch(ctx, bindings, site)
