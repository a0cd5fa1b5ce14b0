"""
Tests for module scope resolution and unique identifier generation.
"""

from debug_macros.estree import nodes as n
from debug_macros.estree.scope import ModuleScope


def test_import_binding_records_module_source():
  program = n.program([n.import_declaration("@ember/env-flags", [n.import_specifier("DEBUG")])])
  binding = ModuleScope(program).get_binding("DEBUG")

  assert binding.kind == "module"
  assert binding.source == "@ember/env-flags"
  assert binding.path.node is program["body"][0]


def test_aliased_import_binds_local_name():
  program = n.program([n.import_declaration("m", [n.import_specifier("DEBUG", "D")])])
  scope = ModuleScope(program)

  assert scope.has_binding("D")
  assert not scope.has_binding("DEBUG")


def test_const_binding_has_no_source():
  program = n.program([n.const_declaration("DEBUG", n.literal(1))])
  binding = ModuleScope(program).get_binding("DEBUG")

  assert binding.kind == "const"
  assert binding.source is None


def test_destructured_names_are_bound():
  pattern = {
    "type": "ObjectPattern",
    "properties": [n.property_node("a", n.identifier("a")), {"type": "RestElement", "argument": n.identifier("rest")}],
  }
  decl = {
    "type": "VariableDeclaration",
    "kind": "let",
    "declarations": [{"type": "VariableDeclarator", "id": pattern, "init": n.identifier("obj")}],
  }
  scope = ModuleScope(n.program([decl]))

  assert scope.has_binding("a")
  assert scope.has_binding("rest")


def test_generate_uid_prefixes_underscore():
  assert ModuleScope(n.program([])).generate_uid("DEBUG") == "_DEBUG"


def test_generate_uid_avoids_bindings_and_references():
  program = n.program(
    [
      n.const_declaration("_DEBUG", n.literal(1)),
      n.expression_statement(n.identifier("_DEBUG2")),
    ]
  )
  assert ModuleScope(program).generate_uid("DEBUG") == "_DEBUG3"


def test_generate_uid_normalizes_base_name():
  assert ModuleScope(n.program([])).generate_uid("__DEBUG12") == "_DEBUG"
