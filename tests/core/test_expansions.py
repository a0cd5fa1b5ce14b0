"""
Tests for the assert / warn / deprecate builders.

Verifies:
1. Deprecation metadata validation happens before any mutation.
2. The formatted deprecation message, with and without a URL.
3. Expired deprecations are removed without registering an expansion.
4. Leading conditions per macro kind.
"""

import pytest

from debug_macros.config import MacroConfig
from debug_macros.core.errors import DeprecationMetaError, MacroArgumentError
from debug_macros.core.expansions import (
  DeprecationMeta,
  ExpansionContext,
  expand_assert,
  expand_deprecate,
  expand_warn,
  format_deprecation_message,
)
from debug_macros.core.guard import ExpansionRegistry
from debug_macros.estree import nodes as n
from debug_macros.estree.emitter import EstreeEmitter
from debug_macros.estree.host import EstreeHost


def make_ctx(statement, **options):
  options.setdefault("envFlags", {"flags": {"DEBUG": 1}})
  program = n.program([statement])
  host = EstreeHost(program)
  ctx = ExpansionContext(host=host, config=MacroConfig(**options), registry=ExpansionRegistry())
  site = host.expression_statements()[0]
  return ctx, site, program


def deprecate_stmt(message="Foo is bad", predicate=None, **meta):
  meta_node = n.object_expression({k: n.literal(v) for k, v in meta.items()})
  args = [n.literal(message), predicate or n.identifier("isBad"), meta_node]
  return n.expression_statement(n.call_expression(n.identifier("deprecate"), args))


def finalize_and_render(ctx, program, guard="_DEBUG"):
  ctx.registry.finalize(ctx.host, guard)
  return EstreeEmitter().emit(program)


def test_message_with_url():
  meta = DeprecationMeta(id="foo-dep", until=">=2.0.0", url="http://x")
  assert (
    format_deprecation_message("Foo is bad", meta)
    == "DEPRECATED [foo-dep]: Foo is bad. Will be removed in >=2.0.0. See http://x for more information."
  )


def test_message_without_url():
  meta = DeprecationMeta(id="foo-dep", until=">=2.0.0")
  assert format_deprecation_message("Foo is bad", meta) == "DEPRECATED [foo-dep]: Foo is bad. Will be removed in >=2.0.0."


@pytest.mark.parametrize("missing", ["id", "until"])
def test_meta_requires_field(missing):
  props = {"id": "foo-dep", "until": "2.0.0", "url": "http://x"}
  del props[missing]

  with pytest.raises(DeprecationMetaError) as excinfo:
    DeprecationMeta.from_properties(props)
  assert excinfo.value.field == missing
  assert isinstance(excinfo.value, ReferenceError)


def test_meta_ignores_unknown_keys():
  meta = DeprecationMeta.from_properties({"id": "a", "until": "2", "since": "1.0"})
  assert meta == DeprecationMeta(id="a", until="2", url=None)


def test_assert_uses_identifiers_as_conditions():
  stmt = n.expression_statement(n.call_expression(n.identifier("assert"), [n.identifier("x"), n.literal("message")]))
  ctx, site, program = make_ctx(stmt)

  expand_assert(ctx, site, stmt["expression"])

  assert finalize_and_render(ctx, program) == '(_DEBUG && x && console.assert(x, "message"));\n'


def test_assert_conditions_are_separate_nodes_from_arguments():
  x = n.identifier("x")
  stmt = n.expression_statement(n.call_expression(n.identifier("assert"), [x]))
  ctx, site, program = make_ctx(stmt)

  expand_assert(ctx, site, stmt["expression"])
  ctx.registry.finalize(ctx.host, "_DEBUG")

  chain = stmt["expression"]["expression"]
  assert chain["right"]["arguments"][0] is x
  assert chain["left"]["right"] == x
  assert chain["left"]["right"] is not x


def test_warn_has_no_leading_conditions():
  stmt = n.expression_statement(n.call_expression(n.identifier("warn"), [n.identifier("msg")]))
  ctx, site, program = make_ctx(stmt, externalizeHelpers=True, helpers={"global": "Ember"})

  expand_warn(ctx, site, stmt["expression"])

  assert finalize_and_render(ctx, program) == "(_DEBUG && Ember.warn(msg));\n"


def test_deprecate_guards_on_predicate():
  stmt = deprecate_stmt(id="foo-dep", until=">=2.0.0", url="http://x")
  ctx, site, program = make_ctx(stmt, packageVersion="1.0.0")

  expand_deprecate(ctx, site, stmt["expression"])

  expected = (
    '(_DEBUG && isBad && console.warn("DEPRECATED [foo-dep]: Foo is bad. '
    'Will be removed in >=2.0.0. See http://x for more information."));\n'
  )
  assert finalize_and_render(ctx, program) == expected


def test_expired_deprecation_is_removed():
  stmt = deprecate_stmt(id="foo-dep", until=">=2.0.0")
  ctx, site, program = make_ctx(stmt, packageVersion="2.1.0")

  expand_deprecate(ctx, site, stmt["expression"])

  assert program["body"] == []
  assert len(ctx.registry) == 0


def test_deprecate_without_package_version_is_kept():
  stmt = deprecate_stmt(id="foo-dep", until=">=2.0.0")
  ctx, site, program = make_ctx(stmt)

  expand_deprecate(ctx, site, stmt["expression"])
  assert len(ctx.registry) == 1


def test_missing_meta_field_fails_before_mutation():
  stmt = deprecate_stmt(until=">=2.0.0")
  ctx, site, program = make_ctx(stmt, packageVersion="3.0.0")

  with pytest.raises(DeprecationMetaError, match='"id"'):
    expand_deprecate(ctx, site, stmt["expression"])
  assert program["body"] == [stmt]


def test_deprecate_arity_is_checked():
  stmt = n.expression_statement(n.call_expression(n.identifier("deprecate"), [n.literal("msg")]))
  ctx, site, _ = make_ctx(stmt)

  with pytest.raises(MacroArgumentError, match="expected"):
    expand_deprecate(ctx, site, stmt["expression"])


def test_deprecate_meta_must_be_object():
  args = [n.literal("msg"), n.identifier("cond"), n.identifier("META")]
  stmt = n.expression_statement(n.call_expression(n.identifier("deprecate"), args))
  ctx, site, _ = make_ctx(stmt)

  with pytest.raises(MacroArgumentError, match="object literal"):
    expand_deprecate(ctx, site, stmt["expression"])
