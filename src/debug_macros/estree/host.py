"""
ESTree Host.

Implements the ``TreeHost`` protocol over an ESTree JSON tree (plain dicts).
Accepts a ``Program`` node or a Babel ``File`` node wrapping one; the tree is
mutated in place. New literals follow the dialect the tree already uses, so
Babel output stays printable by ``@babel/generator``.
"""

import copy
from typing import Any, Dict, List, Optional, Tuple

from debug_macros.estree import nodes as n
from debug_macros.estree.paths import NodePath, collect, walk
from debug_macros.estree.scope import Binding, ModuleScope


class EstreeHost:
  """
  Tree capabilities for a single ESTree module.

  Attributes:
      tree: The root handed in by the caller (``Program`` or ``File``).
      program: The ``Program`` node.
      scope: Module scope resolver for ``program``.
      babel_literals: True when new literals are built as ``StringLiteral`` & co.
  """

  def __init__(self, tree: n.Node):
    if n.node_type(tree) == "File":
      program = tree["program"]
    else:
      program = tree
    if n.node_type(program) != "Program":
      raise ValueError(f"Expected an ESTree Program, got {n.node_type(program)!r}")
    self.tree = tree
    self.program = program
    self.scope = ModuleScope(program)
    self.babel_literals = _uses_babel_literals(tree)

  # --- Construction ---

  def identifier(self, name: str) -> n.Node:
    return n.identifier(name)

  def literal(self, value: Any) -> n.Node:
    if self.babel_literals:
      return n.babel_literal(value)
    return n.literal(value)

  def call(self, callee: n.Node, arguments: List[n.Node]) -> n.Node:
    return n.call_expression(callee, arguments)

  def member(self, obj: n.Node, prop: str) -> n.Node:
    return n.member_expression(obj, n.identifier(prop))

  def logical_and(self, left: n.Node, right: n.Node) -> n.Node:
    return n.logical_expression("&&", left, right)

  def parenthesized(self, expression: n.Node) -> n.Node:
    return n.parenthesized_expression(expression)

  def const_declaration(self, name: str, value: n.Node) -> n.Node:
    return n.const_declaration(name, value)

  def clone(self, node: n.Node) -> n.Node:
    return copy.deepcopy(node)

  # --- Inspection ---

  def is_identifier(self, node: n.Node) -> bool:
    return n.is_identifier(node)

  def callee_name(self, call: n.Node) -> Optional[str]:
    if not n.is_call(call):
      return None
    callee = call.get("callee")
    if n.is_identifier(callee):
      return callee["name"]
    return None

  def call_arguments(self, call: n.Node) -> List[n.Node]:
    return call.get("arguments", [])

  def string_value(self, node: n.Node) -> Optional[str]:
    if n.is_string_literal(node):
      return node["value"]
    return None

  def static_properties(self, node: n.Node) -> Optional[Dict[str, Any]]:
    if not n.is_object(node):
      return None
    props: Dict[str, Any] = {}
    for prop in node.get("properties", []):
      if not n.is_property(prop):
        continue
      key = n.property_key(prop)
      if key is not None:
        props[key] = n.literal_value(prop.get("value"))
    return props

  def line_of(self, node: n.Node) -> Optional[int]:
    loc = node.get("loc") if isinstance(node, dict) else None
    if isinstance(loc, dict):
      return loc.get("start", {}).get("line")
    return None

  # --- Traversal ---

  def import_declarations(self) -> List[NodePath]:
    body = self.program["body"]
    return [NodePath(stmt, self.program, body, "body") for stmt in body if n.node_type(stmt) == "ImportDeclaration"]

  def import_source(self, site: NodePath) -> Optional[str]:
    return n.import_source(site.node)

  def import_specifiers(self, site: NodePath) -> List[Tuple[str, str]]:
    pairs = []
    for specifier in site.node.get("specifiers", []):
      imported = n.imported_name(specifier)
      local = n.local_name(specifier)
      if imported and local:
        pairs.append((imported, local))
    return pairs

  def expression_statements(self) -> List[NodePath]:
    return collect(self.program, "ExpressionStatement")

  def statement_expression(self, site: NodePath) -> n.Node:
    return site.node.get("expression")

  def is_attached(self, site: NodePath) -> bool:
    return site.attached

  # --- Scope ---

  def get_binding(self, name: str) -> Optional[Binding]:
    return self.scope.get_binding(name)

  def generate_uid(self, name: str) -> str:
    return self.scope.generate_uid(name)

  # --- Mutation ---

  def replace_expression(self, site: NodePath, expression: n.Node) -> None:
    site.node["expression"] = expression

  def replace_with_multiple(self, site: NodePath, replacements: List[n.Node]) -> None:
    site.replace_with_multiple(replacements)

  def remove(self, site: NodePath) -> None:
    site.remove()

  def set_import_source(self, site: NodePath, source: str) -> None:
    site.node["source"] = self.literal(source)

  def insert_at_top(self, node: n.Node) -> None:
    self.program["body"].insert(0, node)


def _uses_babel_literals(tree: n.Node) -> bool:
  """
  Detects the literal dialect from the first literal in the tree.

  ``@babel/parser`` writes ``StringLiteral`` & co. unless its ``estree``
  plugin is on. Trees without literals go by their root: ``File`` is Babel.
  """
  for path in walk(tree):
    kind = n.node_type(path.node)
    if kind in n.LITERAL_TYPES and kind != "TemplateLiteral":
      return kind != "Literal"
  return n.node_type(tree) == "File"
